from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def write_doc(tmp_path: Path):
    def write(rel_path: str, text: str) -> Path:
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return write
