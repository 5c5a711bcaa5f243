"""Pixelforge: turn a set of images into one PDF."""

__version__ = "1.0.0"
