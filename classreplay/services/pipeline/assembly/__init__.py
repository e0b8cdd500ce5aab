from .video_assembler import AssembledVideo, SlideForVideo, VideoAssembler

__all__ = ["AssembledVideo", "SlideForVideo", "VideoAssembler"]
