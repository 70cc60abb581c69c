"""Menu-driven wrapper around yt-dlp and ffmpeg."""

__version__ = "0.1.0"
