"""Find the rigid offsets that map one set of poses onto another"""

__version__ = "0.1.0"

from pose_offsets.solver import (  # noqa: F401
    DegeneratePivotError,
    InvalidPoseSetError,
    solve,
)
