"""Camera intrinsics, accumulated least-squares terms and launch-size helpers."""

from __future__ import annotations

from dataclasses import dataclass, fields

# Edge length of the fusion volume in voxels.
VOLUME_RESOLUTION = 512
VOLUME_X = VOLUME_Y = VOLUME_Z = VOLUME_RESOLUTION

# Normal angle (as a cosine weight) at which colour updates reach full weight.
RGB_VIEW_ANGLE_WEIGHT = 0.75


@dataclass(frozen=True)
class Intrinsics:
    """Pinhole camera intrinsics: focal lengths and principal point in pixels."""

    fx: float = 0.0
    fy: float = 0.0
    cx: float = 0.0
    cy: float = 0.0

    def at_level(self, level: int) -> Intrinsics:
        """Intrinsics for pyramid ``level``, where each level halves the resolution."""
        if level < 0:
            raise ValueError(f"pyramid level must be non-negative, got {level}")
        div = 1 << level
        return Intrinsics(self.fx / div, self.fy / div, self.cx / div, self.cy / div)


@dataclass
class JtJJtrSE3:
    """Sums of Jacobian products for a 6-DOF pose solve.

    The columns ``a`` to ``f`` are the six pose parameters and ``g`` is the
    residual, so ``aa`` to ``ff`` form the upper triangle of JᵀJ and ``ag``
    to ``fg`` form Jᵀr. ``residual`` and ``inliers`` are running totals.
    """

    aa: float = 0.0
    ab: float = 0.0
    ac: float = 0.0
    ad: float = 0.0
    ae: float = 0.0
    af: float = 0.0
    ag: float = 0.0

    bb: float = 0.0
    bc: float = 0.0
    bd: float = 0.0
    be: float = 0.0
    bf: float = 0.0
    bg: float = 0.0

    cc: float = 0.0
    cd: float = 0.0
    ce: float = 0.0
    cf: float = 0.0
    cg: float = 0.0

    dd: float = 0.0
    de: float = 0.0
    df: float = 0.0
    dg: float = 0.0

    ee: float = 0.0
    ef: float = 0.0
    eg: float = 0.0

    ff: float = 0.0
    fg: float = 0.0

    residual: float = 0.0
    inliers: float = 0.0

    def add(self, other: JtJJtrSE3) -> None:
        """Add every term of ``other`` to this one, in place."""
        for field in fields(self):
            name = field.name
            setattr(self, name, getattr(self, name) + getattr(other, name))


def div_up(total: int, grain: int) -> int:
    """Number of blocks of size ``grain`` needed to cover ``total`` items."""
    if grain <= 0:
        raise ValueError(f"grain must be positive, got {grain}")
    n = total + grain - 1
    # Integer division truncating toward zero.
    return n // grain if n >= 0 else -((-n) // grain)