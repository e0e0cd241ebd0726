import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))


@pytest.fixture(autouse=True)
def _development_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep listener validation on regardless of the caller's EVENTHUB_* env."""
    from eventhub import settings

    monkeypatch.setattr(settings.SETTINGS, "production_mode", False)
