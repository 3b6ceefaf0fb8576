"""shatterfx render: Pillow texture provider and frame compositor."""

from .texture import TextureProvider, PILTextureProvider
from .compositor import ShatterRenderer, heatmap_color, save_gif

__all__ = ["TextureProvider", "PILTextureProvider", "ShatterRenderer", "heatmap_color", "save_gif"]
