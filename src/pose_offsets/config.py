"""
Defaults and the solver configuration
"""

from dataclasses import dataclass, field

import numpy as np

from pose_offsets.io import load_pose_set

DEFAULT_TOLERANCE = 0.001
DEFAULT_ANIMATION_FRAMES = 120
DEFAULT_PAUSE_SECONDS = 3.0
DEFAULT_OUTPUT_NAME = "output.json"


@dataclass
class SolverConfig:
    """
    Everything one solve pass needs.

    Attributes
    ----------
    model : numpy.ndarray
        (n, 4, 4) model poses.
    space : numpy.ndarray
        (m, 4, 4) space poses.
    tolerance : float
        Pose equality threshold.
    strict : bool
        Raise on a non-invertible pivot instead of returning no offsets.
    """

    model: np.ndarray = field(default_factory=lambda: np.empty((0, 4, 4)))
    space: np.ndarray = field(default_factory=lambda: np.empty((0, 4, 4)))
    tolerance: float = DEFAULT_TOLERANCE
    strict: bool = False

    @classmethod
    def from_files(
        cls, model_path, space_path, tolerance=DEFAULT_TOLERANCE, strict=False
    ):
        return cls(
            model=load_pose_set(model_path),
            space=load_pose_set(space_path),
            tolerance=tolerance,
            strict=strict,
        )
