from .synthesizer import SlideSynthesizer, slide_audio_path, slide_image_path

__all__ = ["SlideSynthesizer", "slide_audio_path", "slide_image_path"]
