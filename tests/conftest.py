from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image as PILImage

ROOT = Path(__file__).resolve().parents[1]
TESTS = Path(__file__).resolve().parent
for entry in (ROOT, TESTS):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

from keyreport.config import ENV_OVERRIDES


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep KEYREPORT_* variables of the host shell out of the tests."""

    for env_key in ENV_OVERRIDES:
        monkeypatch.delenv(env_key, raising=False)


@pytest.fixture
def make_png(tmp_path: Path) -> Callable[[int, int], Path]:
    def _make(width: int, height: int, name: str = "picture.png") -> Path:
        path = tmp_path / name
        PILImage.new("RGB", (width, height), color=(200, 30, 30)).save(path, format="PNG")
        return path

    return _make

