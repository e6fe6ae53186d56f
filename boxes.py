"""
Axis-aligned box decomposition into face patches.

Every face is laid on the full unit plane and clipped to the box through
its UV bounds, so textures line up with the neighbouring full blocks. The
axis/flip table below fixes texture orientation; reversing any flip
mirrors the texture on that face.
"""

from patches import SideVisible
from util import FACE_BOTTOM, FACE_TOP, FACE_XMIN, FACE_XMAX, FACE_ZMIN, FACE_ZMAX

# Patch ids per face: bottom, top, -X, +X, -Z, +Z
DEFAULT_PATCH_IDS = (0, 0, 0, 0, 0, 0)


def add_box(factory, patches, xmin, xmax, ymin, ymax, zmin, zmax, patch_ids=None):
    """Append the faces of a box to `patches`.

    Faces whose patch id is negative are skipped. Bounds ordering is the
    caller's job; an inverted box fails in the factory.
    """
    if patch_ids is None:
        patch_ids = DEFAULT_PATCH_IDS
    if len(patch_ids) != 6:
        raise ValueError(f"box needs 6 face patch ids, got {len(patch_ids)}")
    vis = SideVisible.TOP
    # top
    if patch_ids[FACE_TOP] >= 0:
        patches.append(factory.get_patch(0, ymax, 1, 1, ymax, 1, 0, ymax, 0, vis, patch_ids[FACE_TOP],
                                         xmin, xmax, 1 - zmax, 1 - zmin))
    # bottom
    if patch_ids[FACE_BOTTOM] >= 0:
        patches.append(factory.get_patch(0, ymin, 1, 1, ymin, 1, 0, ymin, 0, vis, patch_ids[FACE_BOTTOM],
                                         xmin, xmax, 1 - zmax, 1 - zmin))
    # -X side
    if patch_ids[FACE_XMIN] >= 0:
        patches.append(factory.get_patch(xmin, 0, 0, xmin, 0, 1, xmin, 1, 0, vis, patch_ids[FACE_XMIN],
                                         zmin, zmax, ymin, ymax))
    # +X side
    if patch_ids[FACE_XMAX] >= 0:
        patches.append(factory.get_patch(xmax, 0, 1, xmax, 0, 0, xmax, 1, 1, vis, patch_ids[FACE_XMAX],
                                         1 - zmax, 1 - zmin, ymin, ymax))
    # -Z side
    if patch_ids[FACE_ZMIN] >= 0:
        patches.append(factory.get_patch(1, 0, zmin, 0, 0, zmin, 1, 1, zmin, vis, patch_ids[FACE_ZMIN],
                                         1 - xmax, 1 - xmin, ymin, ymax))
    # +Z side
    if patch_ids[FACE_ZMAX] >= 0:
        patches.append(factory.get_patch(0, 0, zmax, 1, 0, zmax, 0, 1, zmax, vis, patch_ids[FACE_ZMAX],
                                         xmin, xmax, ymin, ymax))
    return patches


def box_patches(factory, xmin, xmax, ymin, ymax, zmin, zmax, patch_ids=None):
    """Return the faces of one box as a new tuple."""
    return tuple(add_box(factory, [], xmin, xmax, ymin, ymax, zmin, zmax, patch_ids))
