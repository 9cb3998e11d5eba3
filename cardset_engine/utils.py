from __future__ import annotations

import json
from pathlib import Path
from typing import Any

ID_WIDTH = 4


def pad_id(uid: int) -> str:
    """Zero-padded display form of a record identifier (7 -> '0007')."""
    return str(int(uid)).zfill(ID_WIDTH)


def load_json(path: str | Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def read_text(path: str | Path) -> str:
    # utf-8-sig: spreadsheet exports often carry a BOM
    with open(path, "r", encoding="utf-8-sig") as f:
        return f.read()


def write_text(path: str | Path, text: str) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8") as f:
        f.write(text)
    return p
