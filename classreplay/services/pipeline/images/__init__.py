from .illustrator import SlideIllustrator, enhance_prompt, save_image
from .placeholder import create_placeholder_image, gradient_background

__all__ = ["SlideIllustrator", "enhance_prompt", "save_image", "create_placeholder_image", "gradient_background"]
