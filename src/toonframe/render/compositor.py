from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING, Optional

try:
    from PIL import Image, ImageDraw, ImageFont
except Exception:
    Image = None  # type: ignore

if TYPE_CHECKING:
    from PIL.Image import Image as PILImage

from ..engine.state import CameraState, CaptionState, CharacterState, OverlayState, ResolvedFrameState
from ..engine.transitions import CircleClip, Layer, RectClip, apply

logger = logging.getLogger(__name__)

PLACEHOLDER_BG = (42, 42, 42, 255)
PLACEHOLDER_CHAR = (255, 100, 100, 80)
PLACEHOLDER_CHAR_OUTLINE = (255, 100, 100, 160)
PANEL_FILL = (0, 0, 0, 204)
ACCENT = (212, 160, 18, 255)


class CompositorError(Exception):
    pass


class MissingAssetError(CompositorError):
    def __init__(self, asset_type: str, asset_id: str, path: Path):
        self.asset_type = asset_type
        self.asset_id = asset_id
        self.path = path
        super().__init__(f"Missing {asset_type} asset: {asset_id} (expected at {path})")


def _require_pillow():
    if Image is None:
        raise RuntimeError(
            "Pillow required. Install: pip install -e '.[render]'"
        )


def _font(size: int):
    try:
        return ImageFont.truetype("DejaVuSans.ttf", size)
    except OSError:
        return ImageFont.load_default()


def _alpha(color: tuple[int, int, int, int], opacity: float) -> tuple[int, int, int, int]:
    return color[0], color[1], color[2], int(color[3] * max(0.0, min(1.0, opacity)))


class Compositor:
    """Reference rasteriser for resolved frame states.

    Unknown backgrounds and characters are drawn as labelled placeholders so
    authoring mistakes show up in the output instead of stopping a render.
    With ``strict`` a missing asset raises ``MissingAssetError`` instead.
    """

    def __init__(
        self,
        assets_dir: Path,
        resolution: tuple[int, int] = (1920, 1080),
        background_color: tuple[int, int, int] = (26, 26, 26),
        strict: bool = False,
    ):
        _require_pillow()
        self.assets_dir = assets_dir
        self.resolution = resolution
        self.background_color = (*background_color, 255)
        self.strict = strict
        self._bg_cache: dict[str, PILImage] = {}
        self._cutout_cache: dict[str, Optional[PILImage]] = {}
        self._reported: set[str] = set()

    def _report_missing(self, kind: str, asset_id: str, path: Path) -> None:
        if self.strict:
            raise MissingAssetError(kind, asset_id, path)
        key = f"{kind}:{asset_id}"
        if key not in self._reported:
            self._reported.add(key)
            logger.warning(f"Missing {kind} asset: {asset_id} (expected at {path}); drawing placeholder")

    def render_frame(self, state: ResolvedFrameState) -> "PILImage":
        canvas = Image.new("RGBA", self.resolution, self.background_color)
        if state.is_blank:
            return canvas

        scene = self._load_bg(state.background_id).copy()
        if state.board_text:
            self._draw_board_text(scene, state.board_text)
        for char in state.characters:
            self._draw_character(scene, char)
        scene = self._apply_camera(scene, state.camera)

        layer = apply(state.transition.kind, state.transition.progress, Layer(content=scene))
        canvas = self._composite_layer(canvas, layer)

        for overlay in state.overlays:
            canvas = self._draw_overlay(canvas, overlay)
        if state.caption is not None:
            canvas = self._draw_caption(canvas, state.caption)
        return canvas

    def _load_bg(self, bg_id: str) -> "PILImage":
        if bg_id in self._bg_cache:
            return self._bg_cache[bg_id]

        bg_path = self.assets_dir / "bg" / f"{bg_id}.png"
        if bg_path.exists():
            img = Image.open(bg_path).convert("RGBA")
            if img.size != self.resolution:
                img = img.resize(self.resolution, Image.Resampling.LANCZOS)
        else:
            self._report_missing("background", bg_id, bg_path)
            img = Image.new("RGBA", self.resolution, PLACEHOLDER_BG)
            d = ImageDraw.Draw(img)
            label = f"BG: {bg_id}"
            font = _font(24)
            bbox = d.textbbox((0, 0), label, font=font)
            w, h = self.resolution
            d.text(
                ((w - (bbox[2] - bbox[0])) // 2, (h - (bbox[3] - bbox[1])) // 2),
                label,
                fill=(255, 255, 255, 51),
                font=font,
            )
        self._bg_cache[bg_id] = img
        return img

    def _load_cutout(self, character: str, emotion: str) -> Optional["PILImage"]:
        cutout_id = f"{character}_{emotion}"
        if cutout_id in self._cutout_cache:
            return self._cutout_cache[cutout_id]

        cutout_path = self.assets_dir / "cutouts" / f"{cutout_id}.png"
        if not cutout_path.exists():
            cutout_path = self.assets_dir / "cutouts" / f"{character}.png"
        if cutout_path.exists():
            img = Image.open(cutout_path).convert("RGBA")
        else:
            self._report_missing("character", cutout_id, cutout_path)
            img = None
        self._cutout_cache[cutout_id] = img
        return img

    def _draw_board_text(self, img: "PILImage", text: str) -> None:
        d = ImageDraw.Draw(img)
        font = _font(40)
        bbox = d.textbbox((0, 0), text, font=font)
        d.text(((img.width - (bbox[2] - bbox[0])) // 2, 120), text, fill=(240, 240, 230, 255), font=font)

    def _draw_character(self, img: "PILImage", char: CharacterState) -> None:
        blend = char.emotion
        emotion = blend.to_emotion if blend.progress >= 0.5 else blend.from_emotion
        factor = char.scale / 2
        cutout = self._load_cutout(char.id, emotion)
        # idle motion is authored in character units
        cx = char.x + char.idle.sway_x * factor
        cy = char.y + (char.idle.breath_y + char.idle.bounce_y) * factor

        if cutout is not None:
            size = (max(1, int(cutout.width * factor)), max(1, int(cutout.height * factor)))
            cutout = cutout.resize(size, Image.Resampling.LANCZOS)
            img.paste(cutout, (int(cx - cutout.width / 2), int(cy - cutout.height / 2)), cutout)
            return

        # placeholder box with a mouth bar so lip-sync stays visible
        overlay = Image.new("RGBA", img.size, (0, 0, 0, 0))
        d = ImageDraw.Draw(overlay)
        half_w, half_h = 30 * factor, 40 * factor
        box = [cx - half_w, cy - half_h, cx + half_w, cy + half_h]
        d.rounded_rectangle(box, radius=8, fill=PLACEHOLDER_CHAR, outline=PLACEHOLDER_CHAR_OUTLINE, width=2)
        d.text((box[0] + 4, box[1] + 4), char.id, fill=(255, 255, 255, 128), font=_font(10))
        mouth_h = max(1.0, char.mouth_shape * 3 * factor)
        mouth_w = 12 * factor * blend.params.mouth_width
        mouth_y = cy + 15 * factor
        d.ellipse(
            [cx - mouth_w, mouth_y - mouth_h, cx + mouth_w, mouth_y + mouth_h],
            fill=(40, 20, 20, 200),
        )
        img.alpha_composite(overlay)

    def _apply_camera(self, img: "PILImage", camera: CameraState) -> "PILImage":
        if camera.x == 0 and camera.y == 0 and camera.zoom == 1:
            return img
        w, h = self.resolution
        cx, cy = w / 2, h / 2
        inv = 1.0 / camera.zoom
        # output pixel -> source pixel
        data = (inv, 0.0, cx + camera.x - cx * inv, 0.0, inv, cy + camera.y - cy * inv)
        return img.transform(
            (w, h),
            Image.Transform.AFFINE,
            data,
            resample=Image.Resampling.BILINEAR,
            fillcolor=self.background_color,
        )

    def _composite_layer(self, canvas: "PILImage", layer: Layer) -> "PILImage":
        content = layer.content
        w, h = self.resolution

        if layer.scale != 1.0:
            size = (max(1, int(w * layer.scale)), max(1, int(h * layer.scale)))
            content = content.resize(size, Image.Resampling.BILINEAR)

        placed = Image.new("RGBA", (w, h), (0, 0, 0, 0))
        dx = (w - content.width) // 2 + int(round(layer.translate_x * w))
        dy = (h - content.height) // 2
        placed.paste(content, (dx, dy))

        mask = placed.getchannel("A")
        if isinstance(layer.clip, RectClip):
            clip = Image.new("L", (w, h), 0)
            ImageDraw.Draw(clip).rectangle([0, 0, int(layer.clip.width * w), h], fill=255)
            mask = Image.composite(mask, clip, clip)
        elif isinstance(layer.clip, CircleClip):
            r = layer.clip.radius * math.hypot(w, h)
            clip = Image.new("L", (w, h), 0)
            ImageDraw.Draw(clip).ellipse([w / 2 - r, h / 2 - r, w / 2 + r, h / 2 + r], fill=255)
            mask = Image.composite(mask, clip, clip)

        if layer.opacity < 1.0:
            opacity = max(0.0, layer.opacity)
            mask = mask.point(lambda v: int(v * opacity))

        return Image.composite(placed, canvas, mask)

    def _panel_origin(self, overlay: OverlayState, size: tuple[int, int]) -> tuple[float, float]:
        w, h = self.resolution
        bw, bh = size
        position = overlay.payload.get("position")
        if overlay.kind == "topic-card":
            return 60, h - 160 - bh
        if overlay.kind == "caption":
            return (w - bw) / 2, h - 200 - bh
        top = {"stat-card": 160, "bar-chart": 140, "fact-box": 320}[overlay.kind]
        margin = 60 if overlay.kind != "stat-card" else 80
        if position is None:
            position = "left" if overlay.kind == "bar-chart" else "right"
        if position == "left":
            return margin, top
        if position == "center":
            return (w - bw) / 2, top
        return w - margin - bw, top

    def _overlay_lines(self, overlay: OverlayState) -> list[str]:
        p = overlay.payload
        if overlay.kind == "stat-card":
            return [str(p.get("value", "")), str(p.get("label", ""))]
        if overlay.kind == "fact-box":
            return [f"{p.get('accent', '!')}  {p.get('text', '')}"]
        if overlay.kind == "topic-card":
            return [str(p.get("subtitle", "")).upper(), str(p.get("topic", ""))]
        if overlay.kind == "caption":
            return [str(p.get("text", ""))]
        return [str(p.get("title", ""))] if p.get("title") else []

    def _draw_overlay(self, canvas: "PILImage", overlay: OverlayState) -> "PILImage":
        if overlay.opacity <= 0:
            return canvas
        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        d = ImageDraw.Draw(layer)
        font = _font(int(28 * overlay.scale))
        lines = self._overlay_lines(overlay)
        bars = overlay.payload.get("bars", []) if overlay.kind == "bar-chart" else []

        line_h = 40 * overlay.scale
        width = 300 * overlay.scale
        for line in lines:
            bbox = d.textbbox((0, 0), line, font=font)
            width = max(width, bbox[2] - bbox[0] + 64)
        height = 40 + line_h * len(lines) + 34 * len(bars)

        ox, oy = self._panel_origin(overlay, (int(width), int(height)))
        ox += overlay.offset_x
        oy += overlay.offset_y
        d.rounded_rectangle([ox, oy, ox + width, oy + height], radius=8, fill=_alpha(PANEL_FILL, overlay.opacity))

        y = oy + 20
        for line in lines:
            d.text((ox + 32, y), line, fill=_alpha((255, 255, 255, 255), overlay.opacity), font=font)
            y += line_h

        if bars:
            max_value = max((float(b.get("value", 0)) for b in bars), default=0.0) or 1.0
            for element in overlay.elements:
                bar = bars[element.index]
                bar_w = float(bar.get("value", 0)) / max_value * 220 * element.progress
                d.rectangle([ox + 28, y, ox + 28 + bar_w, y + 20], fill=_alpha(ACCENT, overlay.opacity))
                y += 34
        elif overlay.kind == "topic-card" and overlay.elements:
            bar_w = 360 * overlay.elements[0].progress
            d.rectangle([ox, oy - 11, ox + bar_w, oy - 8], fill=_alpha(ACCENT, overlay.opacity))

        canvas.alpha_composite(layer)
        return canvas

    def _draw_caption(self, canvas: "PILImage", caption: CaptionState) -> "PILImage":
        if caption.opacity <= 0:
            return canvas
        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        d = ImageDraw.Draw(layer)
        font = _font(36)
        bbox = d.textbbox((0, 0), caption.text, font=font)
        tw, th = bbox[2] - bbox[0], bbox[3] - bbox[1]
        w, h = self.resolution
        x = (w - tw) / 2
        y = h - 80 - th + caption.offset_y
        d.rounded_rectangle([x - 32, y - 12, x + tw + 32, y + th + 12], radius=8, fill=_alpha((0, 0, 0, 191), caption.opacity))
        d.text((x, y), caption.text, fill=_alpha((255, 255, 255, 255), caption.opacity), font=font)
        canvas.alpha_composite(layer)
        return canvas
