"""
Placeholder slide image

Drawn locally with Pillow when image generation fails: a diagonal gradient
with the slide title and caption centred on it.
"""

import os
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, ImageChops, ImageDraw, ImageFont

from ....core import get_logger

logger = get_logger(__name__, component="placeholder_image")

GRADIENT_START = (0x66, 0x7E, 0xEA)  # #667eea
GRADIENT_END = (0x76, 0x4B, 0xA2)  # #764ba2
TITLE_FONT_SIZE = 72
SUBTITLE_FONT_SIZE = 36
TEXT_COLOR = (255, 255, 255)
SUBTITLE_COLOR = (255, 255, 255, 204)

# Fonts with CJK coverage first; slide text is usually Chinese.
FONT_CANDIDATES = (
    os.getenv("CLASSREPLAY_FONT_PATH", ""),
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/truetype/wqy/wqy-microhei.ttc",
    "/usr/share/fonts/truetype/wqy/wqy-zenhei.ttc",
    "/System/Library/Fonts/PingFang.ttc",
    "/System/Library/Fonts/STHeiti Medium.ttc",
    "C:/Windows/Fonts/msyh.ttc",
    "DejaVuSans.ttf",
)


def pick_font(size: int) -> ImageFont.ImageFont:
    for candidate in FONT_CANDIDATES:
        if not candidate:
            continue
        try:
            return ImageFont.truetype(candidate, size=size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def gradient_background(width: int, height: int) -> Image.Image:
    """Top-left to bottom-right blend of the two gradient colours."""
    vertical = Image.linear_gradient("L").resize((width, height))
    horizontal = Image.linear_gradient("L").rotate(90).resize((width, height))
    mask = ImageChops.add(vertical, horizontal, scale=2.0)
    start = Image.new("RGB", (width, height), GRADIENT_START)
    end = Image.new("RGB", (width, height), GRADIENT_END)
    return Image.composite(end, start, mask)


def _draw_centered(draw: ImageDraw.ImageDraw, text: str, center: Tuple[int, int], font, fill) -> None:
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = center[0] - (right - left) / 2 - left
    y = center[1] - (bottom - top) / 2 - top
    draw.text((x, y), text, font=font, fill=fill)


def create_placeholder_image(
    output_path: Union[str, Path],
    title: str,
    subtitle: Optional[str] = None,
    size: Tuple[int, int] = (1920, 1080),
) -> Path:
    """Render the placeholder as a JPEG at ``output_path``."""
    width, height = size
    image = gradient_background(width, height)
    overlay = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)

    _draw_centered(draw, title or "知识点", (width // 2, int(height * 0.45)), pick_font(TITLE_FONT_SIZE), TEXT_COLOR)
    if subtitle:
        _draw_centered(draw, subtitle, (width // 2, int(height * 0.60)), pick_font(SUBTITLE_FONT_SIZE), SUBTITLE_COLOR)

    image = Image.alpha_composite(image.convert("RGBA"), overlay).convert("RGB")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(output_path, format="JPEG", quality=90)
    logger.info("Placeholder image created", extra={"path": str(output_path)})
    return output_path
