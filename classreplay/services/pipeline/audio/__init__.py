from .speech import SpeechResult, SpeechSynthesizer
from .text_splitter import force_split, split_text_for_tts, utf8_length

__all__ = ["SpeechResult", "SpeechSynthesizer", "force_split", "split_text_for_tts", "utf8_length"]
