"""
Reading and writing pose sets as JSON, and offsets as CSV
"""

import json
import logging
import os
from pathlib import Path

import numpy as np
import pandas as pd

from pose_offsets import poses as ps

logger = logging.getLogger(__name__)

# Row-major field names of an engine 4x4 matrix: m{row}{column}
MATRIX_FIELDS = tuple(f"m{r}{c}" for r in range(4) for c in range(4))


def _matrix_value(value, name):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(
            f"Matrix value {name} must be a number, got {value!r}"
        )
    if not np.isfinite(value):
        raise ValueError(f"Matrix value {name} must be finite, got {value}")
    return float(value)


def pose_from_json(entry):
    """
    Read one pose from a decoded JSON value.

    Parameters
    ----------
    entry : dict or list
        Either an object holding the 16 fields `m00` ... `m33` (other keys
        are ignored), a flat list of 16 numbers in row-major order, or a
        nested 4x4 list.

    Returns
    -------
    numpy.ndarray
        (4, 4) pose.

    Raises
    ------
    ValueError
        If `entry` is none of the accepted forms, or a matrix value is not a
        finite number (`null`, booleans and numeric strings are rejected).
    """
    if isinstance(entry, dict):
        missing = [k for k in MATRIX_FIELDS if k not in entry]
        if missing:
            raise ValueError(
                f"Matrix object is missing fields: {', '.join(missing)}"
            )
        values = [_matrix_value(entry[k], k) for k in MATRIX_FIELDS]
        return np.array(values).reshape(4, 4)
    if isinstance(entry, list):
        if len(entry) == 16:
            values = [
                _matrix_value(v, MATRIX_FIELDS[i]) for i, v in enumerate(entry)
            ]
            return np.array(values).reshape(4, 4)
        if len(entry) == 4 and all(
            isinstance(row, list) and len(row) == 4 for row in entry
        ):
            values = [
                _matrix_value(v, f"m{r}{c}")
                for r, row in enumerate(entry)
                for c, v in enumerate(row)
            ]
            return np.array(values).reshape(4, 4)
        raise ValueError(
            "Matrix list must hold 16 values or 4 rows of 4, "
            f"got {len(entry)} items"
        )
    raise ValueError(
        f"Cannot read a matrix from a JSON {type(entry).__name__}"
    )


def pose_to_json(pose):
    """Whitelisted JSON object for one pose: exactly `m00` ... `m33`."""
    flat = ps.as_pose(pose).ravel()
    return {k: float(v) for k, v in zip(MATRIX_FIELDS, flat)}


def parse_pose_set(text):
    """
    Parse a JSON array of matrices into an (n, 4, 4) pose set.

    Raises
    ------
    ValueError
        If the text is not JSON, is not an array, or holds an entry that is
        not a matrix. The message names the offending entry.
    """
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError(
            f"Pose set must be a JSON array, got {type(data).__name__}"
        )
    poses = []
    for i, entry in enumerate(data):
        try:
            poses.append(pose_from_json(entry))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Entry {i}: {e}") from e
    return ps.as_pose_set(poses)


def load_pose_set(path):
    if not os.path.exists(path):
        raise FileNotFoundError(f"File {path} not found")
    poses = parse_pose_set(Path(path).read_text(encoding="utf-8"))
    logger.debug("Loaded %d poses from %s", len(poses), path)
    return poses


def dump_offsets(offsets):
    """Indented JSON array of whitelisted matrix objects."""
    return json.dumps(
        [pose_to_json(o) for o in ps.as_pose_set(offsets)], indent=2
    )


def check_output_path(path, force):
    path = Path(path)
    if not path.parent.is_dir():
        raise NotADirectoryError(
            f"Output directory {path.parent} is not a directory"
        )
    if path.exists() and not force:
        raise FileExistsError(f"File {path} already exists")
    return path


def export_offsets(offsets, path, force=False):
    """
    Write offsets to a JSON file.

    Parameters
    ----------
    offsets : array_like
        (k, 4, 4) offsets.
    path : str or pathlib.Path
        Destination file.
    force : bool, optional
        If True, overwrite an existing file. The default is False.

    Raises
    ------
    NotADirectoryError
        If the parent directory of `path` does not exist.
    FileExistsError
        If `path` exists and `force` is False.
    """
    path = check_output_path(path, force)
    path.write_text(dump_offsets(offsets), encoding="utf-8")
    logger.info("Wrote %d offsets to %s", len(ps.as_pose_set(offsets)), path)
    return


def offsets_to_dataframe(offsets):
    """
    Tabulate offsets, one row per offset.

    Parameters
    ----------
    offsets : array_like
        (k, 4, 4) offsets.

    Returns
    -------
    pandas.DataFrame
        Columns are `offset` (index in the input), the 16 matrix fields, the
        translation `tx`, `ty`, `tz`, the rotation quaternion `qw`, `qx`,
        `qy`, `qz` and the scale `sx`, `sy`, `sz`. Decomposition columns are
        NaN for singular offsets.
    """
    offsets = ps.as_pose_set(offsets)
    rows = []
    for i, offset in enumerate(offsets):
        row = {"offset": i, **pose_to_json(offset)}
        try:
            t, q, s = ps.decompose_pose(offset)
        except ValueError:
            logger.debug("Offset %d is singular, not decomposed", i)
            t, q, s = np.full(3, np.nan), np.full(4, np.nan), np.full(3, np.nan)
        row.update(zip(("tx", "ty", "tz"), t))
        row.update(zip(("qw", "qx", "qy", "qz"), q))
        row.update(zip(("sx", "sy", "sz"), s))
        rows.append(row)
    columns = (
        ["offset", *MATRIX_FIELDS]
        + ["tx", "ty", "tz", "qw", "qx", "qy", "qz", "sx", "sy", "sz"]
    )
    return pd.DataFrame(rows, columns=columns)


def export_offsets_csv(offsets, path, force=False):
    """Write `offsets_to_dataframe(offsets)` to CSV, same rules as JSON."""
    path = check_output_path(path, force)
    offsets_to_dataframe(offsets).to_csv(path, index=False)
    logger.info("Wrote offset table to %s", path)
    return
