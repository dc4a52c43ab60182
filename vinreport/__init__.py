"""Vehicle history report rendering and delivery."""

__version__ = "1.0.0"
