from .ffmpeg import MediaToolkit, escape_concat_path, escape_filter_path

__all__ = ["MediaToolkit", "escape_concat_path", "escape_filter_path"]
