"""pytest configuration for onepass.

Puts src/ on sys.path and keeps every test away from the real ~/.onepass vault.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent / "src"))


@pytest.fixture(autouse=True)
def _isolate_home(tmp_path, monkeypatch):
    """Point the home directory at a temp dir and clear onepass env overrides."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.delenv("ONEPASS_VAULT", raising=False)
    monkeypatch.delenv("ONEPASS_MASTER_PASSWORD", raising=False)
    return home
