"""Built-in renderers, registered in registry.default_registry on import."""

from renderers.box import BoxRenderer
from renderers.rotated_box import RotatedBoxRenderer
from renderers.pane import PaneRenderer
