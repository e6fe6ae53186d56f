"""
Custom renderer contract and the engine-side binding that drives it.

A renderer produces the patch list for one block instance from the map data
context of that block. One instance serves every block of its block type
and data mask, from many patch worker threads at once, so
`get_render_patch_list` must not write instance state. Anything shared is
built in `initialize_renderer`, which runs once before rendering starts.
"""

import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

import config
import logutil
from boxes import add_box
from patches import PatchError

ALL_BLOCK_DATA = 0xFFFF


class RendererInitError(RuntimeError):
    pass


class RendererStateError(RuntimeError):
    pass


def validate_block_data_mask(mask):
    """Raise ValueError unless `mask` selects at least one data value 0-15."""
    limit = (1 << getattr(config, 'BLOCK_DATA_VALUES', 16)) - 1
    if not isinstance(mask, int) or mask <= 0 or mask > limit:
        raise ValueError(f"block data mask must be in 1..{limit:#x}, got {mask!r}")
    return mask


@dataclass(frozen=True)
class RendererConfig:
    block_id: int
    block_data_mask: int = ALL_BLOCK_DATA
    params: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        validate_block_data_mask(self.block_data_mask)
        object.__setattr__(self, 'params', MappingProxyType(dict(self.params)))

    def handles(self, data):
        return bool(self.block_data_mask & (1 << data))

    def data_values(self):
        return [d for d in range(getattr(config, 'BLOCK_DATA_VALUES', 16)) if self.handles(d)]


class CustomRenderer(object):
    """
    Base class for renderers. Only `get_render_patch_list` must be
    overridden. Subclasses overriding `initialize_renderer` should call the
    base version and give up when it returns False.
    """

    def initialize_renderer(self, factory, block_id, block_data_mask, params):
        return True

    def cleanup_renderer(self):
        pass

    def get_tile_entity_fields_needed(self):
        return ()

    def get_maximum_texture_count(self):
        return 1

    def get_render_patch_list(self, ctx):
        raise NotImplementedError

    def add_box(self, factory, patches, xmin, xmax, ymin, ymax, zmin, zmax, patch_ids=None):
        return add_box(factory, patches, xmin, xmax, ymin, ymax, zmin, zmax, patch_ids)


# Defaults for the optional operations, used when a renderer lacks them.
def _default_initialize(factory, block_id, block_data_mask, params):
    return True


def _default_cleanup():
    pass


def _default_fields():
    return ()


def _default_texture_count():
    return 1


class RendererBinding(object):
    """
    Wraps any object with a `get_render_patch_list(ctx)` method, filling in
    the default behaviour for the optional operations it does not define,
    and enforces the initialize -> render -> cleanup lifecycle.
    """

    NEW = 'new'
    READY = 'ready'
    FAILED = 'failed'
    CLOSED = 'closed'

    def __init__(self, renderer, name=None):
        if not callable(getattr(renderer, 'get_render_patch_list', None)):
            raise TypeError(f"{type(renderer).__name__} has no get_render_patch_list")
        self.renderer = renderer
        self.name = name or type(renderer).__name__
        self.config = None
        self.state = self.NEW
        self.tile_entity_fields = ()
        self.maximum_texture_count = 1
        self._lock = threading.Lock()

    def _op(self, name, default):
        op = getattr(self.renderer, name, None)
        return op if callable(op) else default

    def initialize(self, factory, block_id, block_data_mask=ALL_BLOCK_DATA, params=None):
        """Initialize the renderer once. Returns False when the renderer
        rejects its configuration; the binding is then unusable. Any
        failure leaves the binding FAILED, so it is never retried."""
        with self._lock:
            if self.state != self.NEW:
                raise RendererStateError(f"{self.name} already initialized (state {self.state})")
            try:
                cfg = RendererConfig(block_id, block_data_mask, params or {})
            except ValueError as e:
                logutil.log("RENDERER", f"{self.name} block {block_id}: {e}", level="ERROR")
                self.state = self.FAILED
                return False
            try:
                ok = self._op('initialize_renderer', _default_initialize)(
                    factory, cfg.block_id, cfg.block_data_mask, cfg.params)
            except Exception as e:
                logutil.log("RENDERER", f"{self.name} block {block_id}: initialize raised {e!r}", level="ERROR")
                self.state = self.FAILED
                raise
            if not ok:
                logutil.log(
                    "RENDERER",
                    f"{self.name} rejected block {block_id} mask {block_data_mask:#x} params {dict(cfg.params)}",
                    level="ERROR",
                )
                self.state = self.FAILED
                return False
            # The renderer is set up from here on; release it on any failure.
            try:
                fields = self._op('get_tile_entity_fields_needed', _default_fields)()
                count = self._op('get_maximum_texture_count', _default_texture_count)()
                if count < 1:
                    raise RendererInitError(f"{self.name} declares maximum texture count {count}")
            except Exception:
                self.state = self.FAILED
                self._op('cleanup_renderer', _default_cleanup)()
                raise
            self.config = cfg
            self.tile_entity_fields = tuple(fields or ())
            self.maximum_texture_count = int(count)
            self.state = self.READY
            logutil.log(
                "RENDERER",
                f"{self.name} bound to block {block_id} mask {block_data_mask:#x} textures {count}",
                level="DEBUG",
            )
            return True

    def cleanup(self):
        with self._lock:
            if self.state != self.READY:
                raise RendererStateError(f"{self.name} cleanup in state {self.state}")
            self.state = self.CLOSED
            self._op('cleanup_renderer', _default_cleanup)()

    def get_render_patch_list(self, ctx):
        # No lock: called concurrently from patch workers.
        if self.state != self.READY:
            raise RendererStateError(f"{self.name} render in state {self.state}")
        patches = self.renderer.get_render_patch_list(ctx)
        if getattr(config, 'VALIDATE_PATCHES', True):
            for p in patches:
                if p.texture_index >= self.maximum_texture_count:
                    raise PatchError(
                        f"{self.name} emitted texture {p.texture_index}, maximum is {self.maximum_texture_count}"
                    )
        return patches

    def handles(self, data):
        return self.state == self.READY and self.config.handles(data)
