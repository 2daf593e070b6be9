"""ShareSlides - static slide deck archive toolkit."""

__version__ = "0.1.0"
