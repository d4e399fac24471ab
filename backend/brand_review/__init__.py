"""Brand compliance review backend for a hosted vision-language model."""

__version__ = "0.1.0"
