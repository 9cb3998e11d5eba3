from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .types import HtmlType
from .utils import load_json

DEFAULT_START_ID = 1
DEFAULT_END_ID = 50
DEFAULT_CARDS_PER_ACCORDION = 250
DEFAULT_BLANK_CARDS = 6
DEFAULT_OUTPUT_PREFIX = "flashcards"


class ConfigurationError(ValueError):
    """Fatal problem with the run configuration or its input files."""


@dataclass(frozen=True)
class CardsetConfig:
    target_language: str
    wordlist_path: Path
    images_dir: Path
    default_size: tuple[int, int]
    start_id: int = DEFAULT_START_ID
    end_id: int = DEFAULT_END_ID
    cards_per_accordion: int | None = None  # None: DEFAULT_CARDS_PER_ACCORDION
    blank_cards: int = DEFAULT_BLANK_CARDS
    output_dir: Path = Path(".")
    output_prefix: str = DEFAULT_OUTPUT_PREFIX
    variants: tuple[HtmlType, ...] = (HtmlType.IMAGE, HtmlType.NO_IMAGE, HtmlType.BLANK)
    pdf: bool = False

    @property
    def accordion_size(self) -> int:
        if self.cards_per_accordion is None:
            return DEFAULT_CARDS_PER_ACCORDION
        return self.cards_per_accordion

    def with_overrides(
        self,
        *,
        wordlist_path: str | Path | None = None,
        images_dir: str | Path | None = None,
        output_dir: str | Path | None = None,
        pdf: bool | None = None,
    ) -> CardsetConfig:
        """Apply command line overrides, then re-validate."""
        changes: dict[str, Any] = {}
        if wordlist_path is not None:
            changes["wordlist_path"] = Path(wordlist_path)
        if images_dir is not None:
            changes["images_dir"] = Path(images_dir)
        if output_dir is not None:
            changes["output_dir"] = Path(output_dir)
        if pdf is not None:
            changes["pdf"] = bool(pdf)
        cfg = replace(self, **changes)
        validate_config(cfg)
        return cfg


def _require(data: dict[str, Any], key: str) -> Any:
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ConfigurationError(f"missing required config field: {key}")
    return value


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from e


def _parse_size(value: Any) -> tuple[int, int]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ConfigurationError(f"images.defaultSize must be a [width, height] pair, got {value!r}")
    w = _as_int(value[0], "images.defaultSize[0]")
    h = _as_int(value[1], "images.defaultSize[1]")
    if w <= 0 or h <= 0:
        raise ConfigurationError(f"images.defaultSize must be positive, got {value!r}")
    return w, h


def _parse_variants(value: Any) -> tuple[HtmlType, ...]:
    if not isinstance(value, list) or not value:
        raise ConfigurationError(f"variants must be a non-empty list, got {value!r}")
    out: list[HtmlType] = []
    for v in value:
        try:
            out.append(HtmlType(str(v).upper()))
        except ValueError as e:
            raise ConfigurationError(f"unknown document variant: {v!r}") from e
    return tuple(out)


def _resolve(base: Path, value: str | Path) -> Path:
    p = Path(value).expanduser()
    return p if p.is_absolute() else base / p


def parse_config(data: Any, *, base_dir: str | Path = ".", validate: bool = True) -> CardsetConfig:
    """Build a config from a decoded JSON object.

    Relative paths resolve against base_dir (the config file's folder).
    With validate=False the file system checks are left to the caller, so
    command line paths can replace ones that do not exist.
    """
    if not isinstance(data, dict):
        raise ConfigurationError("config must be a JSON object")
    base = Path(base_dir)

    images = data.get("images")
    if not isinstance(images, dict):
        raise ConfigurationError("missing required config field: images")

    kwargs: dict[str, Any] = {}
    if "variants" in data:
        kwargs["variants"] = _parse_variants(data["variants"])

    cfg = CardsetConfig(
        target_language=str(_require(data, "targetLanguageName")).strip(),
        wordlist_path=_resolve(base, _require(data, "wordlistPath")),
        images_dir=_resolve(base, _require(images, "directory")),
        default_size=_parse_size(images.get("defaultSize")),
        start_id=_as_int(data.get("startId", DEFAULT_START_ID), "startId"),
        end_id=_as_int(data.get("endId", DEFAULT_END_ID), "endId"),
        cards_per_accordion=(
            _as_int(data["cardsPerAccordion"], "cardsPerAccordion")
            if data.get("cardsPerAccordion") is not None
            else None
        ),
        blank_cards=_as_int(data.get("blankCards", DEFAULT_BLANK_CARDS), "blankCards"),
        output_dir=_resolve(base, data.get("outputDir", ".")),
        output_prefix=str(data.get("outputPrefix", DEFAULT_OUTPUT_PREFIX)),
        pdf=bool(data.get("pdf", False)),
        **kwargs,
    )
    if validate:
        validate_config(cfg)
    return cfg


def validate_config(cfg: CardsetConfig) -> None:
    if not cfg.target_language:
        raise ConfigurationError("missing required config field: targetLanguageName")
    if not cfg.wordlist_path.is_file() or not os.access(cfg.wordlist_path, os.R_OK):
        raise ConfigurationError(f"Can't open wordlist {cfg.wordlist_path}")
    if not cfg.images_dir.is_dir() or not os.access(cfg.images_dir, os.R_OK):
        raise ConfigurationError(f"Can't open images folder {cfg.images_dir}")
    if cfg.start_id > cfg.end_id:
        raise ConfigurationError(f"startId ({cfg.start_id}) is greater than endId ({cfg.end_id})")
    # Only an explicit size is checked against the range; the default is larger
    # than the default endId.
    if cfg.cards_per_accordion is not None and cfg.cards_per_accordion > cfg.end_id:
        raise ConfigurationError(
            f"cardsPerAccordion ({cfg.cards_per_accordion}) is greater than endId ({cfg.end_id})"
        )
    if cfg.accordion_size <= 0:
        raise ConfigurationError(f"cardsPerAccordion must be positive, got {cfg.accordion_size}")
    if cfg.blank_cards < 0:
        raise ConfigurationError(f"blankCards must not be negative, got {cfg.blank_cards}")
    if not cfg.output_prefix.strip():
        raise ConfigurationError("outputPrefix must not be empty")


def load_config(config_path: str | Path, **overrides: Any) -> CardsetConfig:
    """Read config.json, apply command line overrides, then validate once.

    overrides are the keyword arguments of CardsetConfig.with_overrides().
    """
    path = Path(config_path)
    if not path.is_file():
        raise ConfigurationError(f"Can't open config file {path}")
    try:
        data = load_json(path)
    except ValueError as e:
        raise ConfigurationError(f"Invalid JSON file {path}: {e}") from e
    cfg = parse_config(data, base_dir=path.parent, validate=False)
    return cfg.with_overrides(**overrides)
