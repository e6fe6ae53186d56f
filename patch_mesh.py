"""
Flatten patch lists into numpy arrays for a consumer that draws quads.

Per patch: 4 corners x 3 floats of position (12), 4 corners x 2 floats of
texture coordinates (8), a unit normal (3) and a texture index. Texture
coordinates are the patch's UV bounds, so a clipped face samples only its
part of the texture, the same way partial blocks scale their UVs.
"""

import numpy as np


def patch_vertices(patches, offset=(0, 0, 0)):
    if not patches:
        return np.zeros((0, 12), dtype=np.float32)
    corners = np.array([p.corners() for p in patches], dtype=np.float64)
    corners += np.asarray(offset, dtype=np.float64)
    return corners.reshape(len(patches), 12).astype(np.float32)


def patch_tex_coords(patches):
    if not patches:
        return np.zeros((0, 8), dtype=np.float32)
    return np.array([p.uv_corners() for p in patches], dtype=np.float32).reshape(len(patches), 8)


def patch_normals(patches):
    if not patches:
        return np.zeros((0, 3), dtype=np.float32)
    return np.array([p.normal for p in patches], dtype=np.float32)


def patch_texture_indices(patches):
    return np.array([p.texture_index for p in patches], dtype=np.int32)


def patch_bounds(patches):
    """Axis aligned bounds (min xyz, max xyz) of a non-empty patch list."""
    if not patches:
        raise ValueError("no patches")
    verts = patch_vertices(patches).reshape(-1, 3)
    return verts.min(axis=0), verts.max(axis=0)
