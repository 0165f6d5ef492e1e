import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from network_blocker import install_network_blocker


@pytest.fixture(autouse=True)
def _default_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEOCODE_MIN_INTERVAL_MS", "0")
    monkeypatch.delenv("EDGE_RESOLVER_URL", raising=False)
    install_network_blocker(monkeypatch)
