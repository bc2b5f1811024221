"""blockpad - block-structured rich-text editor kernel."""

__version__ = "0.1.0"
