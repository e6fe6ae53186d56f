"""
Read-only map data views handed to renderers, one per rendered block.

A context is valid only for the duration of one patch list call. Reads of
the target block, any block of its sector and any block within one block in
every direction are always valid; tile entity fields the renderer declared
are populated before the call.
"""

import numpy as np

import config

AIR = 0


class MapDataError(LookupError):
    pass


class MapDataContext(object):
    """Contract consumed by renderers. Offsets are relative to the target block."""

    x = 0
    y = 0
    z = 0
    patch_factory = None

    def block_type_and_data(self, dx=0, dy=0, dz=0):
        raise NotImplementedError

    def tile_entity_field(self, name, dx=0, dy=0, dz=0):
        raise NotImplementedError

    @property
    def block_type_id(self):
        return self.block_type_and_data()[0]

    @property
    def block_data(self):
        return self.block_type_and_data()[1]

    def block_type_id_at(self, dx, dy, dz):
        return self.block_type_and_data(dx, dy, dz)[0]

    def block_data_at(self, dx, dy, dz):
        return self.block_type_and_data(dx, dy, dz)[1]


def _read_only(arr, dtype):
    view = np.asarray(arr, dtype=dtype).view()
    view.flags.writeable = False
    return view


class ArrayMapDataContext(MapDataContext):
    """
    Context backed by block id / data arrays indexed [x, y, z]. `index` is
    the target block's position inside the arrays; `tile_entities` maps an
    array index tuple to a dict of field name -> value.
    """

    def __init__(self, ids, data, index, position, tile_entities=None, patch_factory=None):
        if np.shape(ids) != np.shape(data):
            raise ValueError(f"block id shape {np.shape(ids)} != data shape {np.shape(data)}")
        self._ids = _read_only(ids, 'u2')
        self._data = _read_only(data, 'u1')
        self._index = tuple(int(i) for i in index)
        self.x, self.y, self.z = position
        self._tile_entities = tile_entities or {}
        self.patch_factory = patch_factory
        self._resolve(0, 0, 0)

    def _resolve(self, dx, dy, dz):
        ix, iy, iz = self._index
        pos = (ix + dx, iy + dy, iz + dz)
        for p, n in zip(pos, self._ids.shape):
            if p < 0 or p >= n:
                raise MapDataError(
                    f"offset ({dx},{dy},{dz}) from ({self.x},{self.y},{self.z}) is outside the readable region"
                )
        return pos

    def block_type_and_data(self, dx=0, dy=0, dz=0):
        pos = self._resolve(dx, dy, dz)
        return int(self._ids[pos]), int(self._data[pos])

    def tile_entity_field(self, name, dx=0, dy=0, dz=0):
        pos = self._resolve(dx, dy, dz)
        fields = self._tile_entities.get(pos)
        if fields is None:
            return None
        return fields.get(name)


class SectorMapData(object):
    """
    One sector plus a one block border taken from its neighbours. Arrays are
    (SECTOR_SIZE + 2, height + 2, SECTOR_SIZE + 2); index (1, 1, 1) is the
    sector's origin block.
    """

    def __init__(self, position, ids, data=None, tile_entities=None, patch_factory=None):
        ids = np.asarray(ids, dtype='u2')
        if data is None:
            data = np.zeros(ids.shape, dtype='u1')
        data = np.asarray(data, dtype='u1')
        if ids.shape != data.shape:
            raise ValueError(f"block id shape {ids.shape} != data shape {data.shape}")
        if ids.ndim != 3 or min(ids.shape) < 3:
            raise ValueError(f"padded sector arrays must be 3d with a border, got {ids.shape}")
        self.position = tuple(position)
        self.ids = _read_only(ids, 'u2')
        self.data = _read_only(data, 'u1')
        self.patch_factory = patch_factory
        self.shape = tuple(s - 2 for s in ids.shape)
        # Tile entities arrive keyed by world position; contexts index the padded arrays.
        sx, sy, sz = self.position
        self.tile_entities = {
            (wx - sx + 1, wy - sy + 1, wz - sz + 1): dict(fields)
            for (wx, wy, wz), fields in (tile_entities or {}).items()
        }

    @classmethod
    def from_tile(cls, position, tile_ids, tile_data=None, tile_entities=None, patch_factory=None):
        """Crop a 3x3 sector tile (centre sector at `position`) to the
        centre sector plus its border, padding Y with air."""
        size = getattr(config, 'SECTOR_SIZE', 16)
        tile_ids = np.asarray(tile_ids, dtype='u2')
        if tile_data is None:
            tile_data = np.zeros(tile_ids.shape, dtype='u1')
        crop = (slice(size - 1, 2 * size + 1), slice(None), slice(size - 1, 2 * size + 1))
        pad = ((0, 0), (1, 1), (0, 0))
        ids = np.pad(tile_ids[crop], pad, mode='constant', constant_values=AIR)
        data = np.pad(np.asarray(tile_data, dtype='u1')[crop], pad, mode='constant', constant_values=0)
        return cls(position, ids, data, tile_entities, patch_factory)

    def local_blocks(self):
        """Iterate over (local position, block id, block data) for every
        non-air block in the sector proper."""
        core = self.ids[1:-1, 1:-1, 1:-1]
        for x, y, z in np.argwhere(core != AIR):
            x, y, z = int(x), int(y), int(z)
            yield (x, y, z), int(core[x, y, z]), int(self.data[x + 1, y + 1, z + 1])

    def world_position(self, local):
        sx, sy, sz = self.position
        x, y, z = local
        return (sx + x, sy + y, sz + z)

    def context_at(self, x, y, z):
        """Return a context for the block at sector-local (x, y, z)."""
        for p, n in zip((x, y, z), self.shape):
            if p < 0 or p >= n:
                raise MapDataError(f"local position ({x},{y},{z}) is outside sector {self.position}")
        return ArrayMapDataContext(
            self.ids, self.data, (x + 1, y + 1, z + 1), self.world_position((x, y, z)),
            self.tile_entities, self.patch_factory,
        )
