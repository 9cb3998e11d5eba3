from __future__ import annotations

import html
import os
from dataclasses import dataclass
from pathlib import Path
from string import Template

from .config import ConfigurationError
from .types import FlashcardRecord, ImageReference, RenderedFragment
from .utils import read_text

TEMPLATE_ROOT = Path(__file__).parent / "templates"

HEADER_IN = "header.htm.in"
FLASH_IN = "flash.htm.in"
PAGE1X2_IN = "page1x2.htm.in"
PAGE2X3_IN = "page2x3.htm.in"
ACCORDION_IN = "accordion.htm.in"
FOOTER_IN = "footer.htm.in"


@dataclass(frozen=True)
class TemplateSet:
    """Folder of ${name}-style markup templates."""

    root: Path = TEMPLATE_ROOT

    def load(self, name: str) -> Template:
        path = Path(self.root) / name
        if not path.is_file():
            raise ConfigurationError(f"Can't open flashcard template file {path}")
        return Template(read_text(path))


def padding_block(width: int, height: int) -> str:
    return f'<div class="img-padding" style="width:{int(width)}px; height:{int(height)}px"></div>'


class TemplateRenderer:
    """Fill one flashcard into the single-card template.

    The template is read once per renderer. With include_images=False every
    card gets the empty padding block, which keeps the page grid aligned the
    same way a card without a picture does.
    """

    def __init__(
        self,
        templates: TemplateSet,
        default_size: tuple[int, int],
        *,
        include_images: bool = True,
        link_root: str | Path | None = None,
    ):
        self.template = templates.load(FLASH_IN)
        self.default_size = default_size
        self.include_images = include_images
        self.link_root = Path(link_root) if link_root is not None else None

    def render(self, record: FlashcardRecord, image_width: int | None = None) -> RenderedFragment:
        text = self.template.safe_substitute(
            pos=html.escape(str(record.pos) if record.pos is not None else ""),
            english=html.escape(record.english),
            lwc=html.escape(record.lwc),
            ipa=html.escape(record.ipa),
            reference=record.display_reference,
            image=self._image_markup(record.img, image_width),
        )
        return RenderedFragment(uid=record.uid, text=text)

    def _image_markup(self, img: ImageReference | None, image_width: int | None) -> str:
        if img is None or not self.include_images:
            width, height = self.default_size
            return padding_block(image_width or width, height)
        src = html.escape(self._src(img.path), quote=True)
        return (
            f'<p><img src="{src}" class="img-fluid mt-1 rounded img-thumbnail" '
            f'style="max-width: {img.width}px; max-height: {img.height}px"></p>'
        )

    def _src(self, path: str) -> str:
        if self.link_root is None:
            return Path(path).as_posix()
        try:
            return Path(os.path.relpath(path, self.link_root)).as_posix()
        except ValueError:
            # different drive on Windows
            return Path(path).resolve().as_uri()
