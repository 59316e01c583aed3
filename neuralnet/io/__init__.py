"""Persistence of trained networks."""

from .serialization import FORMAT_VERSION, deserialize, load, save, serialize

__all__ = ["FORMAT_VERSION", "deserialize", "load", "save", "serialize"]
