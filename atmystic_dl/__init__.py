"""Atmystic AI World script downloader."""
__version__ = "1.0.0"
