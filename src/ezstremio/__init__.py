"""ezStremio: Czech/Slovak dubbed films and TV shows for Stremio."""

__version__ = "0.1.1"
