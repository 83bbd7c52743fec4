"""Smoke test for scripts/example.py."""

from __future__ import annotations

import logging
import runpy
from pathlib import Path

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "example.py"


def test_example_prints_lookups(capsys, monkeypatch, tmp_path):
    """Test the example prints the first lookup, then the surviving key."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TINY_LRU_LOG_LEVEL", "WARNING")
    pkg_logger = logging.getLogger("tiny_lru")
    level = pkg_logger.level

    try:
        module = runpy.run_path(str(SCRIPT))
        assert module["main"]() == 0
    finally:
        pkg_logger.setLevel(level)

    assert capsys.readouterr().out.splitlines() == ["foo", "bar"]
