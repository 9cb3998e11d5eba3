"""Printable flashcard sets for language documentation fieldwork.

This package turns a tab-separated word list plus a folder of numbered
pictures into:
- HTML card sets (with images, without images, blank)
- an optional PDF rendered from the image set

Anki/CSV exporters are out of scope.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
