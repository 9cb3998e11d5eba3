from __future__ import annotations

import logging
from pathlib import Path

from .config import ConfigurationError
from .images import ImageResolver
from .types import FlashcardRecord, PartOfSpeech
from .utils import read_text

logger = logging.getLogger(__name__)

# Fixed column positions
COL_ID = 0
COL_POS = 1
COL_ENGLISH = 2

IPA_HEADER = "ipa"
IPA_PLACEHOLDER = "IPA"


class WordlistError(ValueError):
    """Malformed word list line (bad identifier or part of speech)."""


def _find_column(header: list[str], name: str) -> int | None:
    wanted = name.strip().lower()
    for idx, col in enumerate(header):
        if col.strip().lower() == wanted:
            return idx
    return None


def _cell(fields: list[str], idx: int | None) -> str:
    if idx is None or idx >= len(fields):
        return ""
    return fields[idx].strip()


def parse_wordlist(
    raw_text: str,
    target_language: str,
    resolver: ImageResolver | None = None,
) -> dict[int, FlashcardRecord]:
    """Parse tab-separated word list text into records keyed by identifier.

    Rules:
    - First line is the header; the target language gloss comes from the
      column whose header matches target_language (case-insensitive)
    - Columns 0/1/2 are identifier, part of speech, English gloss
    - Blank lines are ignored; an empty English gloss skips the line with a warning
    - A repeated identifier replaces the earlier record (last write wins)

    The returned dict iterates in ascending identifier order.
    """
    lines = raw_text.splitlines()
    if not lines:
        raise ConfigurationError("word list is empty (no header line)")

    header = lines[0].split("\t")
    lwc_col = _find_column(header, target_language)
    if lwc_col is None:
        raise ConfigurationError(f"unknown target language column: {target_language}")
    ipa_col = _find_column(header, IPA_HEADER)

    records: dict[int, FlashcardRecord] = {}
    for line_no, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        fields = line.split("\t")

        english = _cell(fields, COL_ENGLISH)
        if not english:
            logger.warning("line %d: missing English gloss, skipped", line_no)
            continue

        raw_id = _cell(fields, COL_ID)
        try:
            uid = int(raw_id)
        except ValueError as e:
            raise WordlistError(f"line {line_no}: invalid identifier {raw_id!r}") from e
        if uid <= 0:
            raise WordlistError(f"line {line_no}: identifier must be positive, got {uid}")

        try:
            pos = PartOfSpeech.parse(_cell(fields, COL_POS))
        except ValueError as e:
            raise WordlistError(f"line {line_no}: {e}") from e

        if uid in records:
            logger.warning("line %d: duplicate identifier %d replaces the earlier entry", line_no, uid)

        records[uid] = FlashcardRecord(
            uid=uid,
            pos=pos,
            english=english,
            lwc=_cell(fields, lwc_col),
            ipa=_cell(fields, ipa_col) or IPA_PLACEHOLDER,
            img=resolver.resolve(uid) if resolver is not None else None,
        )

    return {uid: records[uid] for uid in sorted(records)}


def read_wordlist(
    path: str | Path,
    target_language: str,
    resolver: ImageResolver | None = None,
) -> dict[int, FlashcardRecord]:
    return parse_wordlist(read_text(path), target_language, resolver)


def filter_range(records: dict[int, FlashcardRecord], start_id: int, end_id: int) -> list[FlashcardRecord]:
    """Records with start_id <= uid <= end_id, ascending by uid."""
    return [records[uid] for uid in sorted(records) if start_id <= uid <= end_id]


def count_data_lines(raw_text: str) -> int:
    return sum(1 for line in raw_text.splitlines()[1:] if line.strip())
