import logutil
from map_data import MapDataError
from registry import default_registry
from renderers.box import BoxRenderer

# Facing names in quarter-turn order.
FACING_TURNS = {'south': 0, 'west': 1, 'north': 2, 'east': 3}


def quarter_turns_from_field(value):
    """Quarter turns for a tile entity rotation value: an integer (or its
    string form, taken modulo 4) or a facing name."""
    if isinstance(value, str):
        name = value.strip().lower()
        if name in FACING_TURNS:
            return FACING_TURNS[name]
    try:
        return int(value) % 4
    except (TypeError, ValueError):
        raise MapDataError(f"rotation {value!r} is neither a quarter turn count nor a facing") from None


@default_registry.renderer("rotated_box")
class RotatedBoxRenderer(BoxRenderer):
    """
    Box turned about the vertical axis by a tile entity field (param
    `rotfield`, default `rot`) holding quarter turns 0-3 or a facing
    (south, west, north, east). A block without the field renders
    unrotated.
    """

    extra_params = ('rotfield',)

    def __init__(self):
        super().__init__()
        self.rotfield = 'rot'
        self.rotations = ()

    def initialize_renderer(self, factory, block_id, block_data_mask, params):
        if not super().initialize_renderer(factory, block_id, block_data_mask, params):
            return False
        self.rotfield = params.get('rotfield', 'rot')
        if not self.rotfield:
            logutil.log("RENDERER", f"rotated_box block {block_id}: empty rotfield", level="ERROR")
            return False
        self.rotations = tuple(
            tuple(factory.get_rotated_patch(p, 0, 90 * turns, 0) for p in self.patches)
            for turns in range(4)
        )
        return True

    def cleanup_renderer(self):
        super().cleanup_renderer()
        self.rotations = ()

    def get_tile_entity_fields_needed(self):
        return (self.rotfield,)

    def get_render_patch_list(self, ctx):
        rot = ctx.tile_entity_field(self.rotfield)
        if rot is None:
            return self.rotations[0]
        return self.rotations[quarter_turns_from_field(rot)]
