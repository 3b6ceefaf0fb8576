"""Frame compositing: masked triangle sprites placed by evaluated fragment states."""

import logging
import math
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

import torch
from PIL import Image, ImageChops, ImageDraw

from ..core.decompose import Fragment, ShatterResult
from ..core.config import ShatterConfig
from ..core.motion import AutomaticPlayback, FragmentState, evaluate_batch, unbatch
from .texture import TextureProvider

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int, int]


def heatmap_color(intensity: float) -> Tuple[int, int, int]:
    """Red near the blast origin, cyan at the corners."""
    i = min(max(intensity, 0.0), 1.0)
    return int(round(255 * i)), int(round(255 * (1.0 - i))), int(round(255 * (1.0 - i)))


def _triangle_mask(fragment: Fragment, size: Tuple[int, int]) -> Image.Image:
    """L-mode mask of the fragment's triangle within its cell tile."""
    pw, ph = size
    cw, ch = fragment.size
    vertices = [
        (vx / cw * pw + pw / 2.0, ph / 2.0 - vy / ch * ph)
        for vx, vy in fragment.variant.vertices(cw, ch)
    ]
    mask = Image.new("L", size, 0)
    ImageDraw.Draw(mask).polygon(vertices, fill=255)
    return mask


class ShatterRenderer:
    """Composites shatter frames with Pillow.

    Scene units map 1:1 to pixels and the scene origin sits at the canvas
    center, y up.

    Args:
        result: shatter to draw
        provider: texture provider asked once per fragment for its sub-image
        canvas_size: output frame size, image size plus 2 * margin when None
        margin: padding around the image when canvas_size is None
        heatmap: tint fragments by blast intensity
        background: RGBA fill of every frame
    """

    def __init__(
        self,
        result: ShatterResult,
        provider: TextureProvider,
        canvas_size: Optional[Tuple[int, int]] = None,
        margin: int = 0,
        heatmap: bool = False,
        background: Color = (0, 0, 0, 0),
    ):
        self.result = result
        self.heatmap = heatmap
        self.background = background
        if canvas_size is None:
            w, h = result.image_size
            canvas_size = (int(math.ceil(w)) + 2 * margin, int(math.ceil(h)) + 2 * margin)
        self.canvas_size = canvas_size
        self.sprites = [self._build_sprite(fragment, provider) for fragment in result]
        logger.debug("Built %d sprites for %dx%d canvas", len(self.sprites), *canvas_size)

    def _build_sprite(self, fragment: Fragment, provider: TextureProvider) -> Image.Image:
        cw, ch = fragment.size
        size = (max(1, int(round(cw))), max(1, int(round(ch))))
        tile = provider.subtexture(fragment.source_region)
        if tile.mode != "RGBA":
            tile = tile.convert("RGBA")
        if tile.size != size:
            tile = tile.resize(size, resample=Image.BILINEAR)

        if self.heatmap:
            tint = Image.new("RGB", size, heatmap_color(fragment.blast_intensity))
            colored = ImageChops.multiply(tile.convert("RGB"), tint).convert("RGBA")
            colored.putalpha(tile.getchannel("A"))
            tile = colored

        alpha = ImageChops.multiply(tile.getchannel("A"), _triangle_mask(fragment, size))
        tile.putalpha(alpha)
        return tile

    def rest_states(self) -> List[FragmentState]:
        """Identity states: the intact image."""
        return [FragmentState(f.rest_position, 0.0, 1.0, 1.0) for f in self.result]

    def render_states(self, states: Union[Sequence[FragmentState], Dict[str, torch.Tensor]]) -> Image.Image:
        """Draw one frame from per-fragment states (or evaluate_batch output)."""
        if isinstance(states, dict):
            states = unbatch(states)
        if len(states) != len(self.sprites):
            raise ValueError(f"Expected {len(self.sprites)} states, got {len(states)}")

        frame = Image.new("RGBA", self.canvas_size, self.background)
        origin_x, origin_y = self.canvas_size[0] / 2.0, self.canvas_size[1] / 2.0

        for sprite, state in zip(self.sprites, states):
            if state.alpha <= 0.0 or state.scale <= 0.0:
                continue
            img = sprite
            if state.scale != 1.0:
                img = img.resize(
                    (max(1, int(round(img.width * state.scale))), max(1, int(round(img.height * state.scale)))),
                    resample=Image.BILINEAR,
                )
            if state.rotation != 0.0:
                # Positive rotation is counter-clockwise on screen, as in Pillow
                img = img.rotate(math.degrees(state.rotation), expand=True,
                                 resample=Image.BILINEAR, fillcolor=(0, 0, 0, 0))
            if state.alpha < 1.0:
                img = img.copy()
                img.putalpha(img.getchannel("A").point(lambda v: int(v * state.alpha)))

            x, y = state.position
            paste_x = int(round(origin_x + x - img.width / 2.0))
            paste_y = int(round(origin_y - y - img.height / 2.0))
            frame.paste(img, (paste_x, paste_y), img)

        return frame

    def render_progress(self, progress: float, cfg: Optional[ShatterConfig] = None) -> Image.Image:
        """Manual mode frame; floor, fade and device come from cfg."""
        cfg = cfg or ShatterConfig()
        states = evaluate_batch(
            self.result.profiles(),
            progress,
            floor_y=cfg.floor_y,
            fade_start=cfg.fade_start,
            device=cfg.device,
        )
        return self.render_states(states)

    def render_time(self, playback: AutomaticPlayback, t: float) -> Image.Image:
        """Automatic mode frame t seconds after the shatter."""
        return self.render_states(playback.states(self.result, t))

    def render_rest(self) -> Image.Image:
        return self.render_states(self.rest_states())


def save_gif(path: Union[str, Path], frames: List[Image.Image], fps: float = 24) -> None:
    """Write frames as a looping animated GIF."""
    if not frames:
        raise ValueError("No frames to save")
    if not fps > 0:
        raise ValueError(f"fps must be positive, got {fps}")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    frames[0].save(
        path,
        save_all=True,
        append_images=frames[1:],
        duration=int(1000 // fps),
        loop=0,
        disposal=2,  # clear before drawing the next frame
    )
