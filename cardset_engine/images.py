from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from .types import ImageReference
from .utils import pad_id

IMG_FILENAME_RE = re.compile(r"^(bw|c)(\d{4})\.(jpg|png)$")

# Color before black/white, png before jpg.
CANDIDATE_PATTERNS = ("c{id}.png", "c{id}.jpg", "bw{id}.png", "bw{id}.jpg")


@dataclass(frozen=True)
class ImageResolver:
    root: Path
    default_size: tuple[int, int]  # (width, height) display box in pixels

    def candidates(self, uid: int) -> list[Path]:
        padded = pad_id(uid)
        return [Path(self.root) / pattern.format(id=padded) for pattern in CANDIDATE_PATTERNS]

    def resolve(self, uid: int) -> ImageReference | None:
        """Return the preferred image for uid, or None when no file exists.

        Never raises: a missing picture is the normal case for most word lists.
        """
        for p in self.candidates(uid):
            if p.is_file():
                width, height = self._display_size(p)
                return ImageReference(uid=uid, path=str(p), width=width, height=height)
        return None

    def scan(self) -> list[int]:
        """Identifiers of every file in root that follows the c####/bw#### naming."""
        root = Path(self.root)
        if not root.is_dir():
            return []
        ids: set[int] = set()
        for p in root.iterdir():
            m = IMG_FILENAME_RE.match(p.name)
            if m and p.is_file():
                ids.add(int(m.group(2)))
        return sorted(ids)

    def _display_size(self, path: Path) -> tuple[int, int]:
        max_w, max_h = self.default_size
        try:
            with Image.open(path) as img:
                w, h = img.size
        except Exception:
            # fail-soft: unreadable picture still gets the default box
            return max_w, max_h
        return min(w, max_w), min(h, max_h)
