"""
Pose helpers: 4x4 homogeneous matrices stored row-major as numpy arrays
"""

import numpy as np
from trimesh import transformations as tf


def as_pose(pose):
    """
    Coerce a single pose into a float (4, 4) array.

    Parameters
    ----------
    pose : array_like
        Anything numpy can turn into a 4x4 array.

    Returns
    -------
    numpy.ndarray
        (4, 4) float64 array.

    Raises
    ------
    ValueError
        If `pose` is not 4x4.
    """
    arr = np.asarray(pose, dtype=float)
    if arr.shape != (4, 4):
        raise ValueError(f"Pose must be 4x4, got shape {arr.shape}")
    return arr


def as_pose_set(poses):
    """
    Coerce a collection of poses into a float (n, 4, 4) array.

    Parameters
    ----------
    poses : array_like
        A sequence of 4x4 poses, a single 4x4 pose, or an empty sequence.

    Returns
    -------
    numpy.ndarray
        (n, 4, 4) float64 array. A single pose becomes a set of one and an
        empty input becomes shape (0, 4, 4).

    Raises
    ------
    ValueError
        If the input cannot be read as a set of 4x4 poses.
    """
    arr = np.asarray(poses, dtype=float)
    if arr.size == 0:
        return np.empty((0, 4, 4))
    if arr.shape == (4, 4):
        arr = arr[np.newaxis, :, :]
    if arr.ndim != 3 or arr.shape[1:] != (4, 4):
        raise ValueError(
            f"Pose set must have shape (n, 4, 4), got shape {arr.shape}"
        )
    return arr


def pose_distance(a, b):
    """
    Sum over the four rows of the squared distance between matching rows.

    Parameters
    ----------
    a, b : array_like
        4x4 poses.

    Returns
    -------
    float
        Squared Frobenius distance between `a` and `b`.
    """
    diff = as_pose(a) - as_pose(b)
    return float(np.sum(diff * diff))


def pose_equal(a, b, tolerance):
    """
    Test two poses for approximate equality.

    Poses are equal when `pose_distance(a, b)` is strictly less than
    `tolerance`. Identical poses are always equal, so a zero tolerance
    accepts exact matches only.

    Parameters
    ----------
    a, b : array_like
        4x4 poses, in the same row convention.
    tolerance : float
        Non-negative threshold on the summed squared row distance.

    Returns
    -------
    bool
    """
    d = pose_distance(a, b)
    return d < tolerance or d == 0.0


def pairwise_pose_distances(poses_a, poses_b):
    """
    Distance table between two pose sets.

    Parameters
    ----------
    poses_a : array_like
        (n, 4, 4) poses.
    poses_b : array_like
        (m, 4, 4) poses.

    Returns
    -------
    numpy.ndarray
        (n, m) array where entry (i, j) is
        `pose_distance(poses_a[i], poses_b[j])`.
    """
    a = as_pose_set(poses_a)
    b = as_pose_set(poses_b)
    diff = a[:, np.newaxis, :, :] - b[np.newaxis, :, :, :]
    return np.sum(diff * diff, axis=(2, 3))


def is_invertible(pose):
    """Return True if `pose` has a non-zero determinant and can be inverted."""
    arr = as_pose(pose)
    if np.linalg.det(arr) == 0:
        return False
    try:
        inv = np.linalg.inv(arr)
    except np.linalg.LinAlgError:
        return False
    return bool(np.all(np.isfinite(inv)))


def translation_pose(x, y, z):
    """Pure translation by (x, y, z) as a 4x4 pose."""
    return tf.translation_matrix([x, y, z])


def decompose_pose(pose):
    """
    Split a pose into translation, rotation and scale.

    Parameters
    ----------
    pose : array_like
        4x4 affine pose without perspective.

    Returns
    -------
    translation : numpy.ndarray
        (3,) translation.
    quaternion : numpy.ndarray
        (4,) rotation quaternion in w, x, y, z order.
    scale : numpy.ndarray
        (3,) scale along each local axis. Reflections show up as negative
        scale.

    Raises
    ------
    ValueError
        If the pose is singular.

    Notes
    -----
    Shear, if present, is discarded.
    """
    scale, _, angles, translate, _ = tf.decompose_matrix(as_pose(pose))
    quaternion = tf.quaternion_from_euler(*angles)
    return np.asarray(translate), np.asarray(quaternion), np.asarray(scale)


def compose_pose(translation, quaternion, scale):
    """
    Build a pose from translation, rotation quaternion (w, x, y, z) and scale.
    """
    T = tf.translation_matrix(np.asarray(translation, dtype=float))
    R = tf.quaternion_matrix(np.asarray(quaternion, dtype=float))
    S = np.diag(np.append(np.asarray(scale, dtype=float), 1.0))
    return T @ R @ S
