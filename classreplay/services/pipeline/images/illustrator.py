"""
Slide illustration

Appends the house style requirements to a slide's image prompt, calls the
image model and stores the result as a JPEG. Images Pillow cannot decode are
kept in the format the model returned.
"""

import asyncio
import io
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from ....core import get_logger
from ...clients import GeneratedImage, ImageGenerationClient

logger = get_logger(__name__, component="slide_illustrator")

STYLE_REQUIREMENTS = "。".join([
    "高质量、鲜艳的颜色、专业插图、适合儿童教育、清晰的构图、迪士尼皮克斯画质",
    "黑板应该占据画面90%以上的面积，黑板内容清晰可见",
    "画面中只能出现一位卡通老师角色，不要出现学生或其他人物",
    "黑板上的文字必须全部使用中文，不要出现任何英文字母",
    "图片应该适合小学生观看",
])

JPEG_QUALITY = 95


def enhance_prompt(prompt: str) -> str:
    return f"{prompt}。\n\n【重要风格要求】：{STYLE_REQUIREMENTS}。"


def save_image(image: GeneratedImage, output_path: Path) -> Path:
    """Write ``image`` next to ``output_path``; returns the path actually written."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    jpeg_path = output_path.with_suffix(".jpg")
    try:
        with Image.open(io.BytesIO(image.data)) as decoded:
            decoded.convert("RGB").save(jpeg_path, format="JPEG", quality=JPEG_QUALITY)
        return jpeg_path
    except (UnidentifiedImageError, OSError) as e:
        raw_path = output_path.with_suffix(f".{image.format or 'png'}")
        logger.warning("Could not convert image to JPEG, keeping original format", extra={
            "format": image.format,
            "error": str(e),
        })
        raw_path.write_bytes(image.data)
        return raw_path


class SlideIllustrator:
    def __init__(self, image_client: ImageGenerationClient):
        self.image_client = image_client

    async def generate_to_file(self, prompt: str, output_path: Union[str, Path]) -> Path:
        """
        Generate the slide image.

        Raises:
            BoundaryCallError: The image model failed or returned no image
        """
        image = await self.image_client.generate(enhance_prompt(prompt))
        return await asyncio.to_thread(save_image, image, Path(output_path))
