from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import CardsetConfig
from .document import HtmlDocument
from .images import ImageResolver
from .layout import GRID_SLOTS, layout_accordion, layout_grid
from .pdf import render_pdf
from .renderer import PAGE1X2_IN, PAGE2X3_IN, TemplateRenderer, TemplateSet
from .types import FlashcardRecord, HtmlType
from .utils import read_text
from .wordlist import count_data_lines, filter_range, parse_wordlist

logger = logging.getLogger(__name__)


@dataclass
class RunStats:
    lines_total: int = 0
    records_parsed: int = 0
    lines_dropped: int = 0  # skipped lines plus replaced duplicates
    records_in_range: int = 0
    records_with_image: int = 0
    files_written: list[Path] = field(default_factory=list)


class CardsetPipeline:
    def __init__(self, cfg: CardsetConfig, templates: TemplateSet | None = None):
        self.cfg = cfg
        self.templates = templates or TemplateSet()
        self.resolver = ImageResolver(root=cfg.images_dir, default_size=cfg.default_size)

    def output_path(self, html_type: HtmlType) -> Path:
        return self.cfg.output_dir / f"{self.cfg.output_prefix}-{html_type.slug}.html"

    def load_records(self, stats: RunStats | None = None) -> dict[int, FlashcardRecord]:
        raw = read_text(self.cfg.wordlist_path)
        records = parse_wordlist(raw, self.cfg.target_language, self.resolver)
        if stats is not None:
            stats.lines_total = count_data_lines(raw)
            stats.records_parsed = len(records)
        return records

    def build_document(self, html_type: HtmlType, records: list[FlashcardRecord]) -> HtmlDocument:
        doc = HtmlDocument(self.output_path(html_type), self.cfg.target_language, html_type, self.templates)

        if html_type is HtmlType.BLANK:
            renderer = TemplateRenderer(self.templates, self.cfg.default_size, include_images=False)
            blanks = [renderer.render(FlashcardRecord.blank()) for _ in range(self.cfg.blank_cards)]
            doc.append_pages(layout_grid(blanks, self.templates.load(PAGE2X3_IN), GRID_SLOTS))
            return doc

        renderer = TemplateRenderer(
            self.templates,
            self.cfg.default_size,
            include_images=html_type is HtmlType.IMAGE,
            link_root=self.cfg.output_dir,
        )
        fragments = [renderer.render(r) for r in records]
        groups = layout_accordion(
            fragments,
            self.templates.load(PAGE1X2_IN),
            self.cfg.accordion_size,
        )
        doc.append_groups(groups)
        return doc

    def run(self) -> RunStats:
        stats = RunStats()
        records = self.load_records(stats)
        stats.lines_dropped = stats.lines_total - stats.records_parsed

        selected = filter_range(records, self.cfg.start_id, self.cfg.end_id)
        stats.records_in_range = len(selected)
        stats.records_with_image = sum(1 for r in selected if r.img is not None)
        logger.info(
            "%d records parsed, %d in range %d-%d (%d with images)",
            stats.records_parsed,
            stats.records_in_range,
            self.cfg.start_id,
            self.cfg.end_id,
            stats.records_with_image,
        )

        # Assemble everything before touching the output folder.
        docs = [self.build_document(t, selected) for t in self.cfg.variants]
        for doc in docs:
            stats.files_written.append(doc.write_to_file())

        if self.cfg.pdf:
            html_doc = next((d for d in docs if d.html_type is HtmlType.IMAGE), docs[0])
            stats.files_written.append(render_pdf(html_doc.filename, html_doc.filename.with_suffix(".pdf")))

        return stats
