"""streamfix - bring video files to an AAC stereo / WebVTT stream layout."""

__version__ = "0.1.0"
