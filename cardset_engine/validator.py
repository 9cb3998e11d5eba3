from __future__ import annotations

from dataclasses import dataclass, field

from .images import ImageResolver
from .types import FlashcardRecord
from .utils import pad_id


@dataclass
class ValidationReport:
    records: int = 0
    missing_images: list[int] = field(default_factory=list)
    orphan_images: list[int] = field(default_factory=list)

    @property
    def findings(self) -> list[str]:
        out = [f"missing image: #{pad_id(uid)}" for uid in self.missing_images]
        out += [f"orphan image (no word list entry): #{pad_id(uid)}" for uid in self.orphan_images]
        return out

    @property
    def ok(self) -> bool:
        return not self.missing_images and not self.orphan_images


def validate_assets(records: dict[int, FlashcardRecord], resolver: ImageResolver) -> ValidationReport:
    """Cross-check word list entries against the c####/bw#### image files."""
    report = ValidationReport(records=len(records))
    for uid, rec in records.items():
        if rec.img is None and resolver.resolve(uid) is None:
            report.missing_images.append(uid)
    report.orphan_images = [uid for uid in resolver.scan() if uid not in records]
    return report
