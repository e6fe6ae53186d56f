import os
import sys

import numpy as np
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import config
from custom_renderer import (
    CustomRenderer,
    RendererBinding,
    RendererConfig,
    RendererInitError,
    RendererStateError,
    validate_block_data_mask,
)
from map_data import ArrayMapDataContext
from patches import PatchError, RenderPatchFactory, SideVisible


def _ctx(block_id=1, data=0):
    ids = np.zeros((3, 3, 3), dtype='u2')
    blk = np.zeros((3, 3, 3), dtype='u1')
    ids[1, 1, 1] = block_id
    blk[1, 1, 1] = data
    return ArrayMapDataContext(ids, blk, (1, 1, 1), (0, 0, 0))


class OnlyPatches(CustomRenderer):
    def __init__(self, patches=()):
        self.patches = patches

    def get_render_patch_list(self, ctx):
        return self.patches


class PlainRenderer(object):
    """Not a CustomRenderer subclass: only the required operation."""

    def get_render_patch_list(self, ctx):
        return ()


class Recording(CustomRenderer):
    def __init__(self, ok=True, fields=None, count=1):
        self.ok = ok
        self.fields = fields
        self.count = count
        self.calls = []

    def initialize_renderer(self, factory, block_id, block_data_mask, params):
        self.calls.append(('init', block_id, block_data_mask, dict(params)))
        return self.ok

    def cleanup_renderer(self):
        self.calls.append(('cleanup',))

    def get_tile_entity_fields_needed(self):
        return self.fields

    def get_maximum_texture_count(self):
        return self.count

    def get_render_patch_list(self, ctx):
        return ()


def test_default_contract():
    r = OnlyPatches()
    factory = RenderPatchFactory()
    before = dict(vars(r))
    assert r.get_maximum_texture_count() == 1
    assert tuple(r.get_tile_entity_fields_needed()) == ()
    assert r.initialize_renderer(factory, 1, 0xFFFF, {}) is True
    r.cleanup_renderer()
    assert vars(r) == before
    assert len(factory) == 0


def test_base_render_is_abstract():
    with pytest.raises(NotImplementedError):
        CustomRenderer().get_render_patch_list(_ctx())


def test_binding_supplies_defaults_for_plain_objects():
    binding = RendererBinding(PlainRenderer())
    assert binding.initialize(RenderPatchFactory(), 3) is True
    assert binding.maximum_texture_count == 1
    assert binding.tile_entity_fields == ()
    assert binding.get_render_patch_list(_ctx()) == ()
    binding.cleanup()
    assert binding.state == RendererBinding.CLOSED


def test_binding_requires_patch_list_operation():
    with pytest.raises(TypeError):
        RendererBinding(object())


def test_binding_passes_configuration_and_normalizes_fields():
    r = Recording(fields=None, count=4)
    binding = RendererBinding(r)
    assert binding.initialize(RenderPatchFactory(), 12, 0x0003, {"a": "b"})
    assert r.calls == [('init', 12, 0x0003, {"a": "b"})]
    assert binding.tile_entity_fields == ()
    assert binding.maximum_texture_count == 4
    assert binding.config.block_id == 12
    assert binding.handles(0) and binding.handles(1)
    assert not binding.handles(2)


def test_binding_lifecycle_is_enforced():
    r = Recording(fields=["rot"])
    binding = RendererBinding(r)
    with pytest.raises(RendererStateError):
        binding.get_render_patch_list(_ctx())
    with pytest.raises(RendererStateError):
        binding.cleanup()
    assert binding.initialize(RenderPatchFactory(), 1)
    assert binding.tile_entity_fields == ("rot",)
    with pytest.raises(RendererStateError):
        binding.initialize(RenderPatchFactory(), 1)
    binding.cleanup()
    assert r.calls[-1] == ('cleanup',)
    with pytest.raises(RendererStateError):
        binding.cleanup()
    with pytest.raises(RendererStateError):
        binding.get_render_patch_list(_ctx())
    assert [c[0] for c in r.calls].count('cleanup') == 1


def test_failed_initialize_disables_binding():
    r = Recording(ok=False)
    binding = RendererBinding(r)
    assert binding.initialize(RenderPatchFactory(), 1) is False
    assert binding.state == RendererBinding.FAILED
    assert not binding.handles(0)
    with pytest.raises(RendererStateError):
        binding.get_render_patch_list(_ctx())
    with pytest.raises(RendererStateError):
        binding.cleanup()


def test_invalid_mask_fails_initialize():
    r = Recording()
    binding = RendererBinding(r)
    assert binding.initialize(RenderPatchFactory(), 1, 0) is False
    assert r.calls == []


def test_zero_texture_count_is_fatal():
    r = Recording(count=0)
    binding = RendererBinding(r)
    with pytest.raises(RendererInitError):
        binding.initialize(RenderPatchFactory(), 1)
    assert binding.state == RendererBinding.FAILED
    # Already set up, so it is released.
    assert r.calls[-1] == ('cleanup',)
    with pytest.raises(RendererStateError):
        binding.initialize(RenderPatchFactory(), 1)
    assert [c[0] for c in r.calls] == ['init', 'cleanup']


class Exploding(Recording):
    def initialize_renderer(self, factory, block_id, block_data_mask, params):
        super().initialize_renderer(factory, block_id, block_data_mask, params)
        raise KeyError("texture atlas missing")


def test_raising_initialize_is_not_retried():
    r = Exploding()
    binding = RendererBinding(r)
    with pytest.raises(KeyError):
        binding.initialize(RenderPatchFactory(), 1)
    assert binding.state == RendererBinding.FAILED
    with pytest.raises(RendererStateError):
        binding.initialize(RenderPatchFactory(), 1)
    assert [c[0] for c in r.calls] == ['init']
    assert not binding.handles(0)


def test_texture_index_checked_against_maximum():
    factory = RenderPatchFactory()
    patches = (factory.get_patch(0, 0, 0, 1, 0, 0, 0, 1, 0, SideVisible.TOP, 1),)
    binding = RendererBinding(OnlyPatches(patches))
    binding.initialize(factory, 1)
    with pytest.raises(PatchError):
        binding.get_render_patch_list(_ctx())
    prev = getattr(config, "VALIDATE_PATCHES", True)
    config.VALIDATE_PATCHES = False
    try:
        assert binding.get_render_patch_list(_ctx()) is patches
    finally:
        config.VALIDATE_PATCHES = prev


def test_binding_returns_the_renderers_list_object():
    factory = RenderPatchFactory()
    r = OnlyPatches()
    r.patches = tuple(r.add_box(factory, [], 0, 1, 0, 1, 0, 1))
    binding = RendererBinding(r)
    binding.initialize(factory, 1)
    assert binding.get_render_patch_list(_ctx()) is r.patches
    assert binding.get_render_patch_list(_ctx()) is r.patches


def test_renderer_config():
    cfg = RendererConfig(5, 0b1010, {"k": "v"})
    assert cfg.data_values() == [1, 3]
    assert cfg.handles(3) and not cfg.handles(0)
    with pytest.raises(TypeError):
        cfg.params["k"] = "w"
    with pytest.raises(ValueError):
        RendererConfig(5, 0)


@pytest.mark.parametrize("mask", [0, -1, 0x10000, "15", None])
def test_bad_block_data_masks(mask):
    with pytest.raises(ValueError):
        validate_block_data_mask(mask)


def test_good_block_data_masks():
    assert validate_block_data_mask(1) == 1
    assert validate_block_data_mask(0xFFFF) == 0xFFFF
