"""Linear algebra kernel: matrix normalization, skew matrices, quaternions."""

from .matrix import mnormcol, mnormrow, skew, vanish_singular
from .quaternion import (
    IDENTITY,
    quat2rotm,
    quat2rotmjac,
    quatmat,
    quatmultiply,
    quatvalid,
)

__all__ = [
    "mnormcol",
    "mnormrow",
    "skew",
    "vanish_singular",
    "IDENTITY",
    "quatvalid",
    "quatmat",
    "quatmultiply",
    "quat2rotm",
    "quat2rotmjac",
]
