"""Renderer lookup by name: name -> zero argument factory."""

import threading

import logutil
from custom_renderer import ALL_BLOCK_DATA, RendererBinding, RendererInitError


class UnknownRendererError(KeyError):
    pass


class RendererRegistry(object):
    def __init__(self):
        self._factories = {}
        self._lock = threading.Lock()

    def register(self, name, factory):
        with self._lock:
            if name in self._factories:
                raise ValueError(f"renderer {name!r} already registered")
            self._factories[name] = factory
        return factory

    def renderer(self, name):
        """Class decorator registering the class itself as the factory."""
        def wrap(cls):
            return self.register(name, cls)
        return wrap

    def __contains__(self, name):
        return name in self._factories

    def names(self):
        return sorted(self._factories)

    def create(self, name):
        try:
            factory = self._factories[name]
        except KeyError:
            raise UnknownRendererError(name) from None
        return factory()

    def bind(self, name, patch_factory, block_id, block_data_mask=ALL_BLOCK_DATA, params=None):
        """Create and initialize a renderer for one block type.

        A renderer that rejects its configuration is fatal for that block
        type: RendererInitError is raised and nothing is retried.
        """
        binding = RendererBinding(self.create(name), name=name)
        if not binding.initialize(patch_factory, block_id, block_data_mask, params):
            raise RendererInitError(f"renderer {name!r} failed to initialize for block {block_id}")
        logutil.log("REGISTRY", f"bound {name} to block {block_id}", level="DEBUG")
        return binding


default_registry = RendererRegistry()
