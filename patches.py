"""
Render patches: textured planar quads in normalized block space.

A patch is defined by an origin point and the end points of its U and V
edges. The full patch plane spans u, v in [0, 1]; the UV bounds clip it to
the sub-rectangle actually drawn, and the same bounds select the matching
region of the texture. A patch with `uplusvmax` set is a triangle: only
points with u + v <= uplusvmax are part of it.

    v end
      |
      |
    origin ---- u end
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

import config
from util import rotation_matrix, rotate_points

Vec3 = Tuple[float, float, float]


class PatchError(ValueError):
    pass


class SideVisible(Enum):
    """Which side of a patch plane is front facing."""
    TOP = "top"  # side the u x v normal points to
    BOTTOM = "bottom"
    BOTH = "both"
    FLIP = "flip"  # both sides, texture mirrored on the back


@dataclass(frozen=True)
class Patch:
    origin: Vec3
    u: Vec3
    v: Vec3
    umin: float = 0.0
    umax: float = 1.0
    vmin: float = 0.0
    vmax: float = 1.0
    uplusvmax: Optional[float] = None
    visibility: SideVisible = SideVisible.TOP
    texture_index: int = 0

    @property
    def u_end(self):
        return tuple(o + d for o, d in zip(self.origin, self.u))

    @property
    def v_end(self):
        return tuple(o + d for o, d in zip(self.origin, self.v))

    @property
    def points(self):
        """Origin, U end and V end, the form the factory accepts."""
        return (self.origin, self.u_end, self.v_end)

    @property
    def normal(self):
        n = np.cross(self.u, self.v)
        return n / np.linalg.norm(n)

    def uv_corners(self):
        """Return the 4 (u, v) corners of the drawn region, counterclockwise
        from (umin, vmin). Triangles repeat their last corner."""
        if self.uplusvmax is None:
            return [
                (self.umin, self.vmin),
                (self.umax, self.vmin),
                (self.umax, self.vmax),
                (self.umin, self.vmax),
            ]
        u_far = min(self.umax, self.uplusvmax - self.vmin)
        v_far = min(self.vmax, self.uplusvmax - self.umin)
        return [
            (self.umin, self.vmin),
            (u_far, self.vmin),
            (self.umin, v_far),
            (self.umin, v_far),
        ]

    def corners(self):
        """Return the 4 block-space corners matching `uv_corners`."""
        o = np.asarray(self.origin, dtype=np.float64)
        u = np.asarray(self.u, dtype=np.float64)
        v = np.asarray(self.v, dtype=np.float64)
        return np.array([o + u * cu + v * cv for cu, cv in self.uv_corners()])


def _vec(x, y, z):
    return (float(x), float(y), float(z))


class RenderPatchFactory(object):
    """
    Allocates patches for renderers. Identical requests return the identical
    Patch object, so shared patch lists can be compared by identity. Safe to
    call from patch worker threads, though renderers should allocate their
    patches during initialization.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._interned = {}
        self._named = {}

    def __len__(self):
        return len(self._interned)

    def get_patch(self, x0, y0, z0, xu, yu, zu, xv, yv, zv, visibility, texture_index,
                  umin=0.0, umax=1.0, vmin=0.0, vmax=1.0, uplusvmax=None):
        origin = _vec(x0, y0, z0)
        u = _vec(xu - x0, yu - y0, zu - z0)
        v = _vec(xv - x0, yv - y0, zv - z0)
        if not isinstance(visibility, SideVisible):
            raise PatchError(f"visibility must be a SideVisible, got {visibility!r}")
        if int(texture_index) != texture_index or texture_index < 0:
            raise PatchError(f"texture index must be a non-negative integer, got {texture_index!r}")
        if umin > umax or vmin > vmax:
            raise PatchError(f"inverted patch bounds u=[{umin},{umax}] v=[{vmin},{vmax}]")
        if uplusvmax is not None and uplusvmax <= 0:
            raise PatchError(f"uplusvmax must be positive, got {uplusvmax}")
        if not np.any(u) or not np.any(v):
            raise PatchError(f"zero length patch edge at {origin}")
        if np.linalg.norm(np.cross(u, v)) < 1e-12:
            raise PatchError(f"parallel patch edges at {origin}")
        patch = Patch(
            origin, u, v,
            float(umin), float(umax), float(vmin), float(vmax),
            None if uplusvmax is None else float(uplusvmax),
            visibility, int(texture_index),
        )
        return self._intern(patch)

    def get_rotated_patch(self, patch, xrot, yrot, zrot, texture_index=None):
        """Rotate `patch` about the block centre by `xrot`, then `yrot`, then
        `zrot` degrees (multiples of 90). `texture_index` replaces the
        patch's index when given."""
        try:
            matrix = rotation_matrix(xrot, yrot, zrot)
        except ValueError as e:
            raise PatchError(str(e)) from e
        digits = getattr(config, "PATCH_SNAP_DIGITS", 9)
        o, ue, ve = rotate_points(patch.points, matrix, digits=digits)
        if texture_index is None:
            texture_index = patch.texture_index
        return self.get_patch(
            o[0], o[1], o[2], ue[0], ue[1], ue[2], ve[0], ve[1], ve[2],
            patch.visibility, texture_index,
            patch.umin, patch.umax, patch.vmin, patch.vmax, patch.uplusvmax,
        )

    def get_named_patch(self, name, patch=None):
        """Look up, or register when `patch` is given, a shared patch by name."""
        with self._lock:
            existing = self._named.get(name)
            if patch is None:
                return existing
            if existing is not None and existing != patch:
                raise PatchError(f"patch name {name!r} already bound to a different patch")
            self._named[name] = patch
            return patch

    def _intern(self, patch):
        with self._lock:
            return self._interned.setdefault(patch, patch)
