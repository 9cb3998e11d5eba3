from __future__ import annotations

import html
import logging
from pathlib import Path
from typing import Iterable

from .layout import render_group
from .renderer import ACCORDION_IN, FOOTER_IN, HEADER_IN, TemplateSet
from .types import AccordionGroup, HtmlType, RenderedFragment
from .utils import write_text

logger = logging.getLogger(__name__)


class HtmlDocument:
    """One HTML card set, built in memory and written to disk once.

    The header is in place from construction. Pages, groups or loose
    fragments are appended in order; seal() adds the footer exactly once and
    write_to_file() seals first if the caller has not.
    """

    def __init__(self, filename: str | Path, lwc: str, html_type: HtmlType, templates: TemplateSet | None = None):
        self.templates = templates or TemplateSet()
        self.title = f"Card sets ({lwc}) - {html_type.value}"
        self.filename = Path(filename)
        self.html_type = html_type
        self.sealed = False

        self._accordion = self.templates.load(ACCORDION_IN)
        self._parts: list[str] = [self.templates.load(HEADER_IN).safe_substitute(title=html.escape(self.title))]

    def _append(self, text: str) -> None:
        if self.sealed:
            raise RuntimeError(f"document already sealed: {self.filename}")
        self._parts.append(text)

    def append_fragments(self, fragments: Iterable[RenderedFragment]) -> None:
        for f in fragments:
            self._append(f.text)

    def append_pages(self, pages: Iterable[str]) -> None:
        for page in pages:
            self._append(page)

    def append_groups(self, groups: Iterable[AccordionGroup]) -> None:
        for group in groups:
            self._append(render_group(group, self._accordion))

    def seal(self) -> None:
        if self.sealed:
            return
        self._parts.append(self.templates.load(FOOTER_IN).template)
        self.sealed = True

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def write_to_file(self) -> Path:
        # Overwrites an existing file; calling twice rewrites the same content.
        self.seal()
        out = write_text(self.filename, self.text)
        logger.info("Flashcards written to %s", out)
        return out
