import logutil
from boxes import add_box
from custom_renderer import CustomRenderer
from registry import default_registry
from util import HORIZONTAL_NEIGHBORS, FACE_XMIN, FACE_XMAX, FACE_ZMIN, FACE_ZMAX

PANE_PARAMS = ('thickness', 'connect')


def _arm_ids(hidden_face):
    ids = [0] * 6
    ids[hidden_face] = -1
    return ids


@default_registry.renderer("pane")
class PaneRenderer(CustomRenderer):
    """
    Centre post with an arm toward each horizontal neighbour that connects.
    Blocks of the renderer's own type always connect; param `connect` adds
    more block ids (comma separated). Param `thickness` sets the post width.
    """

    def __init__(self):
        self.connect_ids = frozenset()
        self.thickness = 0.125
        self.lists = ()

    def initialize_renderer(self, factory, block_id, block_data_mask, params):
        if not super().initialize_renderer(factory, block_id, block_data_mask, params):
            return False
        try:
            unknown = sorted(set(params) - set(PANE_PARAMS))
            if unknown:
                raise ValueError(f"unknown params {', '.join(unknown)}")
            self.thickness = float(params.get('thickness', 0.125))
            extra = [int(s) for s in params.get('connect', '').split(',') if s.strip()]
        except ValueError as e:
            logutil.log("RENDERER", f"pane block {block_id}: bad params: {e}", level="ERROR")
            return False
        if not 0.0 < self.thickness < 1.0:
            logutil.log("RENDERER", f"pane block {block_id}: thickness {self.thickness} outside (0, 1)", level="ERROR")
            return False
        self.connect_ids = frozenset([block_id] + extra)
        self.lists = tuple(self._build(factory, mask) for mask in range(16))
        return True

    def _build(self, factory, mask):
        lo = 0.5 - self.thickness / 2
        hi = 0.5 + self.thickness / 2
        patches = []
        add_box(factory, patches, lo, hi, 0, 1, lo, hi)
        if mask & 1:  # north
            add_box(factory, patches, lo, hi, 0, 1, 0, lo, _arm_ids(FACE_ZMAX))
        if mask & 2:  # east
            add_box(factory, patches, hi, 1, 0, 1, lo, hi, _arm_ids(FACE_XMIN))
        if mask & 4:  # south
            add_box(factory, patches, lo, hi, 0, 1, hi, 1, _arm_ids(FACE_ZMIN))
        if mask & 8:  # west
            add_box(factory, patches, 0, lo, 0, 1, lo, hi, _arm_ids(FACE_XMAX))
        return tuple(patches)

    def cleanup_renderer(self):
        self.lists = ()

    def connection_mask(self, ctx):
        mask = 0
        for bit, (dx, dy, dz) in enumerate(HORIZONTAL_NEIGHBORS):
            if ctx.block_type_id_at(dx, dy, dz) in self.connect_ids:
                mask |= 1 << bit
        return mask

    def get_render_patch_list(self, ctx):
        return self.lists[self.connection_mask(ctx)]
