import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import renderers  # noqa: F401
from custom_renderer import CustomRenderer, RendererBinding, RendererInitError
from patches import RenderPatchFactory
from registry import RendererRegistry, UnknownRendererError, default_registry


class Empty(CustomRenderer):
    def get_render_patch_list(self, ctx):
        return ()


class Refuses(CustomRenderer):
    def initialize_renderer(self, factory, block_id, block_data_mask, params):
        return False

    def get_render_patch_list(self, ctx):
        return ()


def test_register_and_create():
    reg = RendererRegistry()
    reg.register("empty", Empty)
    assert "empty" in reg
    assert reg.names() == ["empty"]
    a = reg.create("empty")
    b = reg.create("empty")
    assert isinstance(a, Empty)
    assert a is not b


def test_decorator_registers_class():
    reg = RendererRegistry()

    @reg.renderer("decorated")
    class Decorated(Empty):
        pass

    assert isinstance(reg.create("decorated"), Decorated)


def test_duplicate_and_unknown_names():
    reg = RendererRegistry()
    reg.register("empty", Empty)
    with pytest.raises(ValueError):
        reg.register("empty", Empty)
    with pytest.raises(UnknownRendererError):
        reg.create("nope")
    with pytest.raises(KeyError):
        reg.bind("nope", RenderPatchFactory(), 1)


def test_bind_returns_ready_binding():
    reg = RendererRegistry()
    reg.register("empty", lambda: Empty())
    binding = reg.bind("empty", RenderPatchFactory(), 7, 0x00F0, {"x": "1"})
    assert isinstance(binding, RendererBinding)
    assert binding.state == RendererBinding.READY
    assert binding.name == "empty"
    assert binding.config.params == {"x": "1"}
    assert binding.handles(4) and not binding.handles(3)


def test_bind_failure_is_fatal():
    reg = RendererRegistry()
    reg.register("refuses", Refuses)
    with pytest.raises(RendererInitError):
        reg.bind("refuses", RenderPatchFactory(), 1)


def test_builtin_renderers_registered():
    for name in ("box", "rotated_box", "pane"):
        assert name in default_registry
