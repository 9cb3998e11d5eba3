from __future__ import annotations

from string import Template
from typing import Sequence

from .types import AccordionGroup, RenderedFragment
from .utils import pad_id

GRID_SLOTS = 6  # 2 columns x 3 rows
ACCORDION_SLOTS = 2  # 1 column x 2 rows


def fill_page(page_template: Template, texts: Sequence[str], slots: int) -> str:
    """Substitute ${card0}..${card<slots-1>}; missing cards leave the slot empty."""
    values = {f"card{i}": (texts[i] if i < len(texts) else "") for i in range(slots)}
    return page_template.safe_substitute(values)


def layout_grid(
    fragments: Sequence[RenderedFragment],
    page_template: Template,
    slots_per_page: int = GRID_SLOTS,
) -> list[str]:
    """N-up pages in strict input order; the last page may have empty slots."""
    if slots_per_page <= 0:
        raise ValueError(f"slots_per_page must be positive, got {slots_per_page}")
    pages: list[str] = []
    for i in range(0, len(fragments), slots_per_page):
        chunk = fragments[i : i + slots_per_page]
        pages.append(fill_page(page_template, [f.text for f in chunk], slots_per_page))
    return pages


def layout_accordion(
    fragments: Sequence[RenderedFragment],
    page_template: Template,
    cards_per_accordion: int,
) -> list[AccordionGroup]:
    """Two cards per page, pages grouped into labelled collapsible sections.

    A group is sealed once the number of cards placed since the start of the
    document is a multiple of cards_per_accordion, or when input runs out.
    Boundaries count card slots, not identifiers, so an odd size seals at
    multiples of twice its value.

    Each group is labelled with the identifiers of the first and the last
    card actually placed in it.
    """
    if cards_per_accordion <= 0:
        raise ValueError(f"cards_per_accordion must be positive, got {cards_per_accordion}")

    groups: list[AccordionGroup] = []
    index = 0
    while index < len(fragments):
        first = index
        pages: list[str] = []
        while True:
            chunk = fragments[index : index + ACCORDION_SLOTS]
            pages.append(fill_page(page_template, [f.text for f in chunk], ACCORDION_SLOTS))
            index += len(chunk)
            if index % cards_per_accordion == 0 or index >= len(fragments):
                break

        start, end = fragments[first].uid, fragments[index - 1].uid
        groups.append(AccordionGroup(start=pad_id(start), end=pad_id(end), markup="".join(pages)))

    return groups


def render_group(group: AccordionGroup, accordion_template: Template) -> str:
    return accordion_template.safe_substitute(start=group.start, end=group.end, flashcard=group.markup)
