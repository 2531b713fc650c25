"""
Surface reflection for the collision engine.

A cell patch describes the boundary beneath one raster cell as a bilinear
surface through its four corners. A displacement segment that dips below
that surface is split at the intersection point, and the remainder of the
displacement is mirrored about the local surface normal, so the particle
bounces off the boundary instead of passing through it.

All computations assume a Euclidean metric: segments and patches must be
in projected coordinates.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from scipy.optimize import brentq

from collision_core.data_models import Point3, Segment, CellPatch


@dataclass(frozen=True)
class BilinearSurface:
    """
    Bilinear surface S(u, v) = a + b*u + c*v + d*u*v over one cell.

    u and v are the normalized horizontal coordinates within the cell,
    running from 0 at the south-west corner to 1 at the north-east corner.
    """

    x0: float
    y0: float
    width: float
    height: float
    a: float
    b: float
    c: float
    d: float

    @classmethod
    def from_patch(cls, patch: CellPatch) -> 'BilinearSurface':
        sw, se, ne, nw = patch.vertices
        return cls(
            x0=sw.x,
            y0=sw.y,
            width=se.x - sw.x,
            height=nw.y - sw.y,
            a=sw.z,
            b=se.z - sw.z,
            c=nw.z - sw.z,
            d=sw.z - se.z - nw.z + ne.z,
        )

    def local(self, x: float, y: float) -> Tuple[float, float]:
        """Convert a horizontal position to (u, v)."""
        return (x - self.x0) / self.width, (y - self.y0) / self.height

    def elevation(self, x: float, y: float) -> float:
        """Surface elevation at (x, y)."""
        u, v = self.local(x, y)
        return self.a + self.b * u + self.c * v + self.d * u * v

    def normal(self, x: float, y: float) -> Tuple[float, float, float]:
        """Upward unit normal of the surface at (x, y)."""
        u, v = self.local(x, y)
        dz_dx = (self.b + self.d * v) / self.width
        dz_dy = (self.c + self.d * u) / self.height
        norm = math.sqrt(dz_dx * dz_dx + dz_dy * dz_dy + 1.0)
        return -dz_dx / norm, -dz_dy / norm, 1.0 / norm


def _overlap(segment: Segment, surface: BilinearSurface) -> Optional[Tuple[float, float]]:
    """
    Parameter range [t_lo, t_hi] within [0, 1] over which the segment lies
    above the surface's horizontal extent, or None if it never does.
    """
    t_lo, t_hi = 0.0, 1.0
    u0, v0 = surface.local(segment.start.x, segment.start.y)
    u1, v1 = surface.local(segment.end.x, segment.end.y)

    for p0, p1 in ((u0, u1), (v0, v1)):
        dp = p1 - p0
        if dp == 0.0:
            if p0 < 0.0 or p0 > 1.0:
                return None
            continue
        ta = (0.0 - p0) / dp
        tb = (1.0 - p0) / dp
        if ta > tb:
            ta, tb = tb, ta
        t_lo = max(t_lo, ta)
        t_hi = min(t_hi, tb)
        if t_lo > t_hi:
            return None

    return t_lo, t_hi


def _clearance(segment: Segment, surface: BilinearSurface):
    """
    Height of the segment above the surface as a function of t.

    Returns:
        Tuple of (f, t_vertex) where f(t) = z(t) - S(t), a quadratic in t,
        and t_vertex is the parameter of its turning point (None if f is
        linear)
    """
    u0, v0 = surface.local(segment.start.x, segment.start.y)
    u1, v1 = surface.local(segment.end.x, segment.end.y)
    du, dv = u1 - u0, v1 - v0
    dz = segment.end.z - segment.start.z

    qa = -surface.d * du * dv
    qb = dz - surface.b * du - surface.c * dv - surface.d * (u0 * dv + v0 * du)
    qc = segment.start.z - (surface.a + surface.b * u0 + surface.c * v0 + surface.d * u0 * v0)

    def f(t: float) -> float:
        return (qa * t + qb) * t + qc

    t_vertex = -qb / (2.0 * qa) if qa != 0.0 else None
    return f, t_vertex


def find_crossing(segment: Segment, patch: CellPatch) -> Optional[float]:
    """
    Locate where a segment first passes below a patch surface.

    Only the stretch of the segment above the patch's horizontal extent is
    considered. A segment that starts that stretch beneath the surface, or
    that only touches the surface without going below it, has no crossing.

    Args:
        segment: Segment in projected coordinates
        patch: Patch in projected coordinates

    Returns:
        Parameter t in [0, 1) of the crossing point, or None
    """
    surface = BilinearSurface.from_patch(patch)
    span = _overlap(segment, surface)
    if span is None:
        return None
    t_lo, t_hi = span

    f, t_vertex = _clearance(segment, surface)
    if f(t_lo) < 0.0:
        return None

    # f is monotone on each piece, so a piece that ends below the surface
    # contains exactly one crossing
    knots = [t_lo]
    if t_vertex is not None and t_lo < t_vertex < t_hi:
        knots.append(t_vertex)
    knots.append(t_hi)

    for a, b in zip(knots[:-1], knots[1:]):
        fa, fb = f(a), f(b)
        if fb < 0.0:
            if fa == 0.0:
                return a
            return brentq(f, a, b, xtol=1e-14)

    return None


def reflect(segment: Segment, patch: CellPatch) -> Segment:
    """
    Bounce a segment off the surface of a patch.

    Args:
        segment: Proposed displacement in projected coordinates
        patch: Surface patch in projected coordinates

    Returns:
        The original segment if it does not cross the surface; otherwise a
        new segment from the intersection point to the end of the
        displacement mirrored about the surface normal. The reflected
        segment's length plus the distance to the intersection equals the
        original length.
    """
    t_hit = find_crossing(segment, patch)
    if t_hit is None:
        return segment

    surface = BilinearSurface.from_patch(patch)
    hit = segment.point_at(t_hit)

    rx = segment.end.x - hit.x
    ry = segment.end.y - hit.y
    rz = segment.end.z - hit.z
    nx, ny, nz = surface.normal(hit.x, hit.y)
    dot = rx * nx + ry * ny + rz * nz

    reflected_end = Point3(
        hit.x + rx - 2.0 * dot * nx,
        hit.y + ry - 2.0 * dot * ny,
        hit.z + rz - 2.0 * dot * nz,
    )
    return Segment(hit, reflected_end)


def nibble(segment: Segment, distance: float) -> Segment:
    """
    Move the start of a segment toward its end by a small distance.

    Args:
        segment: Segment to shorten
        distance: Distance to move the start point

    Returns:
        The shortened segment; a segment shorter than the distance
        collapses onto its end point
    """
    length = segment.length
    if length <= distance:
        return Segment(segment.end, segment.end)
    return Segment(segment.point_at(distance / length), segment.end)
