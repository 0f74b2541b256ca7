"""Reference library loading."""

from .library import ReferenceDocument, ReferenceLibrary, StaticLibrary

__all__ = [
    "ReferenceDocument",
    "ReferenceLibrary",
    "StaticLibrary",
]
