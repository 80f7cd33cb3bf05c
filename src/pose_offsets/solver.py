"""
Search for the rigid offsets that map a model pose set onto a space pose set
"""

import logging

import numpy as np

from pose_offsets import poses as ps
from pose_offsets.config import DEFAULT_TOLERANCE

logger = logging.getLogger(__name__)


class InvalidPoseSetError(ValueError):
    """Raised when a pose set cannot be solved against (e.g. it is empty)."""


class DegeneratePivotError(ValueError):
    """Raised in strict mode when the first model pose is not invertible."""


def _check_tolerance(tolerance):
    tolerance = float(tolerance)
    if not np.isfinite(tolerance) or tolerance < 0:
        raise ValueError(
            f"Tolerance must be a finite non-negative number, got {tolerance}"
        )
    return tolerance


def _within_tolerance(distances, tolerance):
    return (distances < tolerance) | (distances == 0.0)


def candidate_offsets(model, space):
    """
    Candidate offsets `s @ inv(model[0])` for every pose `s` in `space`.

    Parameters
    ----------
    model : array_like
        (n, 4, 4) model poses. Only the first one is used.
    space : array_like
        (m, 4, 4) space poses.

    Returns
    -------
    numpy.ndarray
        (m, 4, 4) candidate offsets, in space order.

    Raises
    ------
    InvalidPoseSetError
        If `model` is empty.
    DegeneratePivotError
        If `model[0]` is not invertible.
    """
    model = ps.as_pose_set(model)
    space = ps.as_pose_set(space)
    if len(model) == 0:
        raise InvalidPoseSetError("Model pose set is empty")
    pivot = model[0]
    if not ps.is_invertible(pivot):
        raise DegeneratePivotError(
            "First model pose is not invertible "
            f"(determinant {np.linalg.det(pivot)})"
        )
    return space @ np.linalg.inv(pivot)


def is_valid_offset(offset, model, space, tolerance=DEFAULT_TOLERANCE):
    """
    Check that `offset` sends every model pose onto some space pose.

    Matches are not consumed: several model poses may land on the same space
    pose.

    Parameters
    ----------
    offset : array_like
        4x4 candidate offset.
    model : array_like
        (n, 4, 4) model poses.
    space : array_like
        (m, 4, 4) space poses.
    tolerance : float, optional
        Threshold passed to the pose equality test. The default is 0.001.

    Returns
    -------
    bool
    """
    tolerance = _check_tolerance(tolerance)
    offset = ps.as_pose(offset)
    model = ps.as_pose_set(model)
    space = ps.as_pose_set(space)
    if len(space) == 0:
        return len(model) == 0
    moved = offset @ model
    matches = _within_tolerance(
        ps.pairwise_pose_distances(moved, space), tolerance
    )
    return bool(np.all(np.any(matches, axis=1)))


def solve(model, space, tolerance=DEFAULT_TOLERANCE, strict=False):
    """
    Find every offset that maps the model pose set into the space pose set.

    The first model pose is used as the pivot. Each space pose `s` gives a
    candidate `s @ inv(pivot)`, which is kept if every model pose, moved by
    it, matches at least one space pose within `tolerance`.

    Parameters
    ----------
    model : array_like
        (n, 4, 4) model poses, n >= 1.
    space : array_like
        (m, 4, 4) space poses, possibly empty.
    tolerance : float, optional
        Non-negative threshold on the summed squared row distance between
        poses. The default is 0.001.
    strict : bool, optional
        If True, raise `DegeneratePivotError` when the pivot is not
        invertible instead of returning no offsets. The default is False.

    Returns
    -------
    numpy.ndarray
        (k, 4, 4) accepted offsets, in the order of the space poses they were
        built from.

    Raises
    ------
    InvalidPoseSetError
        If `model` is empty.
    DegeneratePivotError
        If `strict` is True and the pivot is not invertible.
    ValueError
        If `tolerance` is negative or not finite, or an input is not a set of
        4x4 poses.

    Notes
    -----
    The search costs O(m * n * m) pose comparisons and is meant for sets of
    tens to a few hundred poses. Only the first model pose is tried as pivot.

    Examples
    --------
    >>> import numpy as np
    >>> from pose_offsets.poses import translation_pose
    >>> T = translation_pose(1, 0, 0)
    >>> solve([np.eye(4)], [T])
    array([[[1., 0., 0., 1.],
            [0., 1., 0., 0.],
            [0., 0., 1., 0.],
            [0., 0., 0., 1.]]])
    """
    tolerance = _check_tolerance(tolerance)
    model = ps.as_pose_set(model)
    space = ps.as_pose_set(space)
    logger.debug(
        "Solving %d model poses against %d space poses, tolerance %g",
        len(model),
        len(space),
        tolerance,
    )
    try:
        candidates = candidate_offsets(model, space)
    except DegeneratePivotError:
        if strict:
            raise
        logger.warning("First model pose is not invertible, no offsets found")
        return np.empty((0, 4, 4))

    keep = [
        is_valid_offset(offset, model, space, tolerance)
        for offset in candidates
    ]
    offsets = candidates[np.array(keep, dtype=bool)]
    logger.info(
        "Found %d valid offsets out of %d candidates",
        len(offsets),
        len(candidates),
    )
    return offsets


def solve_config(config):
    """Run `solve` with the pose sets and options held by a `SolverConfig`."""
    return solve(
        config.model,
        config.space,
        tolerance=config.tolerance,
        strict=config.strict,
    )
