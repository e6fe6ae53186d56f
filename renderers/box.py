import logutil
from boxes import DEFAULT_PATCH_IDS, box_patches
from custom_renderer import CustomRenderer
from registry import default_registry

BOUND_PARAMS = ('xmin', 'xmax', 'ymin', 'ymax', 'zmin', 'zmax')
BOUND_DEFAULTS = (0.0, 1.0, 0.0, 1.0, 0.0, 1.0)
PATCH_PARAMS = tuple(f"patch{i}" for i in range(6))


def parse_box_params(params, extra=()):
    """Return (bounds, patch ids) from renderer params, raising ValueError
    for anything malformed. Keys other than the bounds, the patch ids and
    `extra` are rejected."""
    unknown = sorted(set(params) - set(BOUND_PARAMS) - set(PATCH_PARAMS) - set(extra))
    if unknown:
        raise ValueError(f"unknown params {', '.join(unknown)}")
    bounds = []
    for name, default in zip(BOUND_PARAMS, BOUND_DEFAULTS):
        value = float(params.get(name, default))
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"{name}={value} outside [0, 1]")
        bounds.append(value)
    for lo, hi in ((0, 1), (2, 3), (4, 5)):
        if bounds[lo] > bounds[hi]:
            raise ValueError(f"{BOUND_PARAMS[lo]} > {BOUND_PARAMS[hi]}")
    ids = [int(params.get(name, default)) for name, default in zip(PATCH_PARAMS, DEFAULT_PATCH_IDS)]
    if max(ids) < 0:
        raise ValueError("every face hidden")
    return tuple(bounds), tuple(ids)


@default_registry.renderer("box")
class BoxRenderer(CustomRenderer):
    """
    A single box from params xmin..zmax (default full block) with optional
    per-face texture ids patch0..patch5 (bottom, top, -X, +X, -Z, +Z);
    a negative id hides the face.
    """

    # Params a subclass accepts on top of the box params.
    extra_params = ()

    def __init__(self):
        self.bounds = BOUND_DEFAULTS
        self.patch_ids = DEFAULT_PATCH_IDS
        self.patches = ()

    def initialize_renderer(self, factory, block_id, block_data_mask, params):
        if not super().initialize_renderer(factory, block_id, block_data_mask, params):
            return False
        try:
            self.bounds, self.patch_ids = parse_box_params(params, self.extra_params)
            self.patches = box_patches(factory, *self.bounds, patch_ids=self.patch_ids)
        except ValueError as e:
            logutil.log("RENDERER", f"box block {block_id}: bad params: {e}", level="ERROR")
            return False
        return True

    def cleanup_renderer(self):
        self.patches = ()

    def get_maximum_texture_count(self):
        return max(self.patch_ids) + 1

    def get_render_patch_list(self, ctx):
        return self.patches
