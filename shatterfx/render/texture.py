"""Texture providers: sub-images addressed by normalized rects."""

from typing import Protocol, Tuple

from PIL import Image

from ..core.geometry import Rect


class TextureProvider(Protocol):
    """Returns the drawable sub-image for a normalized, bottom-left-origin region."""

    def subtexture(self, region: Rect) -> Image.Image:
        ...


class PILTextureProvider:
    """Texture provider backed by an in-memory Pillow image.

    Regions use texture space (origin bottom-left, y up) and are flipped to
    Pillow's top-left origin when cropping.
    """

    def __init__(self, image: Image.Image):
        self.image = image if image.mode == "RGBA" else image.convert("RGBA")

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def pixel_box(self, region: Rect) -> Tuple[int, int, int, int]:
        """Pixel crop box (left, upper, right, lower) for a region."""
        W, H = self.image.size
        left = int(round(region.x * W))
        right = int(round(region.max_x * W))
        upper = int(round((1.0 - region.max_y) * H))
        lower = int(round((1.0 - region.y) * H))
        # Keep at least one pixel so tiny cells still render
        right = max(right, left + 1)
        lower = max(lower, upper + 1)
        return left, upper, right, lower

    def subtexture(self, region: Rect) -> Image.Image:
        return self.image.crop(self.pixel_box(region))
