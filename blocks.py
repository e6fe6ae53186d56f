import renderers  # registers the built-in renderers
from custom_renderer import ALL_BLOCK_DATA
from registry import default_registry


class Block(object):
    name = None
    # Registered renderer name; None for plain cube blocks drawn by the engine.
    renderer = None
    # Bit N set: block data value N uses this renderer.
    data_mask = ALL_BLOCK_DATA
    params = {}

class Slab(Block):
    name = 'Slab'
    renderer = 'box'
    data_mask = 0x00FF
    params = {'ymax': '0.5', 'patch0': '0', 'patch1': '1', 'patch2': '2', 'patch3': '2', 'patch4': '2', 'patch5': '2'}

class Carpet(Block):
    name = 'Carpet'
    renderer = 'box'
    params = {'ymax': '0.0625'}

class Cake(Block):
    name = 'Cake'
    renderer = 'box'
    params = {'xmin': '0.0625', 'xmax': '0.9375', 'ymax': '0.5', 'zmin': '0.0625', 'zmax': '0.9375',
              'patch0': '0', 'patch1': '1', 'patch2': '2', 'patch3': '2', 'patch4': '2', 'patch5': '2'}

class Chest(Block):
    name = 'Chest'
    renderer = 'rotated_box'
    params = {'xmin': '0.0625', 'xmax': '0.9375', 'ymax': '0.875', 'zmin': '0.0625', 'zmax': '0.9375',
              'patch4': '1', 'rotfield': 'facing'}

class GlassPane(Block):
    name = 'Glass Pane'
    renderer = 'pane'

class Fence(Block):
    name = 'Fence'
    renderer = 'pane'
    params = {'thickness': '0.25'}

class Stone(Block):
    name = 'Stone'

# Explicit ordering keeps block IDs stable.
BLOCKS = [
    Stone,
    Slab,
    Carpet,
    Cake,
    Chest,
    GlassPane,
    Fence,
]
i = 1
BLOCK_ID = {}
for x in BLOCKS:
    BLOCK_ID[x.name] = i
    i+=1

# Fences also join the stone next to them.
Fence.params = dict(Fence.params, connect=str(BLOCK_ID['Stone']))


def bind_block_renderers(factory, registry=default_registry, blocks=BLOCKS):
    """Initialize one renderer per custom block type. Returns
    {block id: RendererBinding}; any failed binding raises."""
    bindings = {}
    for block in blocks:
        if block.renderer is None:
            continue
        bindings[BLOCK_ID[block.name]] = registry.bind(
            block.renderer, factory, BLOCK_ID[block.name], block.data_mask, block.params,
        )
    return bindings


def cleanup_block_renderers(bindings):
    for binding in bindings.values():
        binding.cleanup()
