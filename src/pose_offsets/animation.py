"""
Frame-stepped walk through a sequence of offsets.

The host owns the clock: it calls `OffsetAnimator.advance` once per frame with
the elapsed time and applies the returned pose however it likes.
"""

import logging
from dataclasses import dataclass

import numpy as np
from scipy.spatial.transform import Rotation, Slerp

from pose_offsets import poses as ps
from pose_offsets.config import DEFAULT_ANIMATION_FRAMES, DEFAULT_PAUSE_SECONDS

logger = logging.getLogger(__name__)


def _wxyz_to_rotation(q):
    return Rotation.from_quat(np.asarray(q)[[1, 2, 3, 0]])


def _interpolate_components(start, end, t):
    t = float(np.clip(t, 0.0, 1.0))
    t0, q0, s0 = start
    t1, q1, s1 = end
    slerp = Slerp(
        [0.0, 1.0],
        Rotation.concatenate([_wxyz_to_rotation(q0), _wxyz_to_rotation(q1)]),
    )
    q = slerp([t]).as_quat()[0][[3, 0, 1, 2]]
    translation = (1 - t) * t0 + t * t1
    scale = (1 - t) * s0 + t * s1
    return ps.compose_pose(translation, q, scale)


def interpolate_pose(start, end, t):
    """
    Blend two poses.

    Translation and scale are interpolated linearly, rotation spherically.

    Parameters
    ----------
    start, end : array_like
        4x4 poses.
    t : float
        Blend factor, clamped to [0, 1].

    Returns
    -------
    numpy.ndarray
        (4, 4) pose.
    """
    return _interpolate_components(
        ps.decompose_pose(start), ps.decompose_pose(end), t
    )


@dataclass
class AnimationState:
    current_index: int = 0
    next_index: int = 0
    frame: int = 0
    progress: float = 0.0
    pause_remaining: float = 0.0


class OffsetAnimator:
    """
    Loop through offsets, blending from each one to the next.

    Each segment takes `frames` calls to `advance`, and is followed by a
    pause of `pause` seconds holding the segment's end pose. After the last
    offset the walk wraps around to the first.

    Parameters
    ----------
    offsets : array_like
        (k, 4, 4) offsets, k >= 1.
    frames : int, optional
        Frames per segment. The default is 120.
    pause : float, optional
        Seconds to hold between segments. The default is 3.0.

    Raises
    ------
    ValueError
        If there are no offsets, an offset cannot be decomposed, `frames` is
        not positive or `pause` is negative.
    """

    def __init__(
        self,
        offsets,
        frames=DEFAULT_ANIMATION_FRAMES,
        pause=DEFAULT_PAUSE_SECONDS,
    ):
        self.offsets = ps.as_pose_set(offsets)
        if len(self.offsets) == 0:
            raise ValueError("No offsets to animate")
        if frames < 1:
            raise ValueError(f"frames must be at least 1, got {frames}")
        if pause < 0:
            raise ValueError(f"pause must be non-negative, got {pause}")
        self.frames = int(frames)
        self.pause = float(pause)
        self._components = [ps.decompose_pose(o) for o in self.offsets]
        self.reset()

    def __len__(self):
        return len(self.offsets)

    def reset(self):
        self.state = AnimationState(
            current_index=0, next_index=1 % len(self.offsets)
        )

    @property
    def pose(self):
        s = self.state
        return _interpolate_components(
            self._components[s.current_index],
            self._components[s.next_index],
            s.progress,
        )

    def advance(self, dt):
        """
        Move the animation on by one frame, or by `dt` seconds of pause.

        Parameters
        ----------
        dt : float
            Seconds since the previous call. Only consumed while pausing, so
            a host that always passes 0 never leaves a pause.

        Returns
        -------
        numpy.ndarray
            The pose to show for this frame.
        """
        s = self.state
        if s.pause_remaining > 0:
            s.pause_remaining = max(s.pause_remaining - dt, 0.0)
            return self.pose
        s.frame += 1
        s.progress = s.frame / self.frames
        if s.frame >= self.frames:
            pose = self.pose
            n = len(self.offsets)
            s.current_index = (s.current_index + 1) % n
            s.next_index = (s.current_index + 1) % n
            s.frame = 0
            s.progress = 0.0
            s.pause_remaining = self.pause
            logger.debug("Reached offset %d", s.current_index)
            return pose
        return self.pose
