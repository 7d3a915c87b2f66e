from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    """
    Ensure `src/` is on sys.path so tests can import `plotcraft`
    without requiring an editable install.
    """
    repo_root = Path(__file__).resolve().parents[1]
    src_root = repo_root / "src"
    sys.path.insert(0, str(src_root))


@pytest.fixture
def canvas():
    from plotcraft.core.data_types import CanvasSettings

    return CanvasSettings(200, 100)


@pytest.fixture
def context(canvas):
    from plotcraft.core.execution import ExecutionContext
    from plotcraft.engine.rng import create_rng

    return ExecutionContext(canvas=canvas, seed=42, rng=create_rng(42))
