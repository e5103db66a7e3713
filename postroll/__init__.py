"""Static blog generator: markdown posts in, plain HTML/CSS out."""

__version__ = "0.1.0"
