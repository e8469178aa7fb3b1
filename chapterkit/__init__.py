"""
chapterkit - Video chapter audio extractor.

Downloads a video from a URL and produces audio files through a four-stage
pipeline: metadata fetch → media download → full-audio extraction →
per-chapter extraction.
"""

__version__ = "0.1.0"
