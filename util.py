import numpy as np


# Face order used by box patch ids: bottom, top, -X, +X, -Z, +Z
FACE_BOTTOM = 0
FACE_TOP = 1
FACE_XMIN = 2
FACE_XMAX = 3
FACE_ZMIN = 4
FACE_ZMAX = 5


# Horizontal neighbours in pane/fence connection bit order.
HORIZONTAL_NEIGHBORS = [
    ( 0, 0,-1), #north, bit 0
    ( 1, 0, 0), #east, bit 1
    ( 0, 0, 1), #south, bit 2
    (-1, 0, 0), #west, bit 3
]

BLOCK_CENTER = np.array([0.5, 0.5, 0.5])

_QUARTER_SIN = (0, 1, 0, -1)


def quarter_turns(degrees):
    """ Return the number of quarter turns in `degrees`, or None if the
    angle is not a multiple of 90.

    """
    if degrees % 90 != 0:
        return None
    return int(degrees // 90) % 4


def rotation_matrix(xrot, yrot, zrot):
    """ Return the 3x3 rotation applying `xrot`, then `yrot`, then `zrot`
    degrees about the X, Y and Z axes. Angles must be multiples of 90.

    """
    mats = []
    for axis, deg in enumerate((xrot, yrot, zrot)):
        turns = quarter_turns(deg)
        if turns is None:
            raise ValueError(f"rotation {deg} is not a multiple of 90 degrees")
        s = _QUARTER_SIN[turns]
        c = _QUARTER_SIN[(turns + 1) % 4]
        m = np.eye(3)
        i, j = [a for a in range(3) if a != axis]
        if axis == 1:
            # Right-handed rotation about Y runs Z -> X.
            i, j = j, i
        m[i, i] = c
        m[i, j] = -s
        m[j, i] = s
        m[j, j] = c
        mats.append(m)
    rx, ry, rz = mats
    return rz @ ry @ rx


def rotate_points(points, matrix, center=BLOCK_CENTER, digits=9):
    """ Rotate an (N, 3) array of block-space points about `center`.

    """
    pts = np.asarray(points, dtype=np.float64)
    out = (pts - center) @ matrix.T + center
    out = np.round(out, digits)
    # Drop negative zero.
    out[out == 0] = 0.0
    return out
