"""
ClassReplay: turns classroom recordings and timestamp markers into narrated slide videos
"""

__version__ = "1.0.0"
