"""Forest Dash: a side-scrolling forest runner."""

__version__ = "0.1.0"
