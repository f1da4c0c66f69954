"""moviefinder: locate a movie's detail page on a year-indexed listing site."""

__version__ = "0.1.0"
