from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))


import pytest

from tests.document_helpers import sample_document, sample_provider


@pytest.fixture
def provider():
    return sample_provider()


@pytest.fixture
def document_path(tmp_path: Path) -> Path:
    path = tmp_path / "document.json"
    path.write_text(json.dumps(sample_document(), indent=2), encoding="utf-8")
    return path
