from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .utils import pad_id


class PartOfSpeech(Enum):
    NOUN = "noun"
    VERB = "verb"
    # Noun-class schemes
    CLASS_I = "I"
    CLASS_II = "II"
    CLASS_III = "III"

    @classmethod
    def parse(cls, code: str) -> PartOfSpeech:
        """Parse a raw word list code.

        Accepts the value or member name (case-insensitive) and the numeric
        codes 0/1 for noun/verb. Raises ValueError for anything else.
        """
        token = code.strip()
        numeric = {"0": cls.NOUN, "1": cls.VERB}
        if token in numeric:
            return numeric[token]
        for member in cls:
            if token.lower() in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"unknown part of speech: {code!r}")

    def __str__(self) -> str:
        return self.value


class HtmlType(Enum):
    IMAGE = "IMAGE"
    NO_IMAGE = "NO IMAGE"
    BLANK = "BLANK"

    @property
    def slug(self) -> str:
        return self.value.lower().replace(" ", "-")


@dataclass(frozen=True)
class ImageReference:
    uid: int
    path: str
    width: int  # display box, pixels
    height: int


@dataclass(frozen=True)
class FlashcardRecord:
    uid: int
    pos: PartOfSpeech | None
    english: str
    lwc: str  # gloss in the language of wider communication
    ipa: str
    img: ImageReference | None = None

    @property
    def display_reference(self) -> str:
        return f"#{pad_id(self.uid)}" if self.uid else "#"

    @classmethod
    def blank(cls) -> FlashcardRecord:
        return cls(uid=0, pos=None, english="", lwc="", ipa="")


@dataclass(frozen=True)
class RenderedFragment:
    uid: int
    text: str


@dataclass(frozen=True)
class AccordionGroup:
    start: str  # zero-padded label
    end: str
    markup: str  # concatenated page markup of the member fragments
