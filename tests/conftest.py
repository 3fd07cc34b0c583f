"""
Pytest fixtures and configuration.

Following TDD principles:
- Fixtures provide real-world-like ledger rows and source responses
- HTTP is faked with httpx.MockTransport, never the network
- Each test should be independent and fast
"""
from typing import Any, Callable

import httpx
import pytest
import yaml

from legislink_core.citation_types import default_registry
from legislink_core.config import CourtListenerCredentials, Environment
from legislink_core.ledger import Ledger


# =============================================================================
# LEDGER FIXTURES
# =============================================================================

LEDGER_VOLUMES: dict[int, list[dict[str, Any]]] = {
    # One entry spanning pages 1-50 that is also a public law
    43: [
        {
            "volume": 43, "page": 1, "npages": 50, "type": "publaw",
            "congress": 67, "number": 1,
            "title": "An Act imposing temporary duties upon certain agricultural products",
            "file": "c1.pdf", "citation": "ch. 1",
        },
        {
            "volume": 43, "page": 60, "type": "publaw", "congress": 67, "number": 2,
            "topic": "Deficiency appropriations", "file": "c2.pdf", "citation": "ch. 2",
        },
    ],
    # Page 12 is claimed by a statute starting there and two spanning it
    10: [
        {
            "volume": 10, "page": 5, "npages": 10, "type": "privlaw",
            "congress": 30, "number": 3, "topic": "For the relief of John Doe",
            "file": "c3.pdf", "citation": "ch. 3",
        },
        {
            "volume": 10, "page": 12, "type": "publaw", "congress": 30, "number": 7,
            "title": "An Act establishing a post route", "file": "c7.pdf", "citation": "ch. 7",
        },
        {
            "volume": 10, "page": 8, "npages": 6, "type": "publaw", "congress": 30,
            "number": 5, "title": "An Act regulating the survey of lands",
            "file": "c5.pdf", "citation": "ch. 5",
        },
        {
            "volume": 10, "page": 100, "type": "publaw", "congress": 30, "number": 9,
            "title": "An Act for unrelated purposes", "file": "c9.pdf", "citation": "ch. 9",
        },
    ],
    # Laws of the 67th Congress (law resolver lookups by congress/number)
    42: [
        {
            "volume": 42, "page": 5, "type": "publaw", "congress": 67, "number": 1,
            "title": "Emergency Tariff Act", "file": "c1.pdf", "citation": "ch. 1",
        },
        {
            "volume": 42, "page": 1501, "type": "privlaw", "congress": 67, "number": 1,
            "topic": "For the relief of Mary Roe", "file": "pc1.pdf", "citation": "ch. 1",
        },
    ],
    # 75th Congress, first of its three volumes (51 and 52 left out on purpose)
    50: [
        {
            "volume": 50, "page": 3, "type": "publaw", "congress": 75, "number": 1,
            "title": "An Act relating to the inauguration", "file": "c1.pdf", "citation": "ch. 1",
        },
    ],
}


@pytest.fixture
def ledger_dir(tmp_path):
    """Directory of NNN.yaml ledger files written from LEDGER_VOLUMES."""
    data_dir = tmp_path / "ledger"
    data_dir.mkdir()
    for volume, rows in LEDGER_VOLUMES.items():
        with open(data_dir / f"{volume:03d}.yaml", "w", encoding="utf-8") as f:
            yaml.safe_dump(rows, f)
    return data_dir


@pytest.fixture
def ledger(ledger_dir) -> Ledger:
    return Ledger(ledger_dir)


# =============================================================================
# CITATION FIXTURES
# =============================================================================

@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def env(ledger_dir) -> Environment:
    """Environment without CourtListener credentials."""
    return Environment(ledger_dir=str(ledger_dir), timeout=5.0)


@pytest.fixture
def env_with_courtlistener(ledger_dir) -> Environment:
    return Environment(
        courtlistener=CourtListenerCredentials("reader", "secret"),
        ledger_dir=str(ledger_dir),
        timeout=5.0,
    )


# =============================================================================
# SOURCE RESPONSE FIXTURES
# =============================================================================

STATUTE_MODS = b"""<?xml version="1.0" encoding="UTF-8"?>
<mods xmlns="http://www.loc.gov/mods/v3" version="3.3">
  <titleInfo><title>Public Law 117-169</title></titleInfo>
  <extension>
    <granuleClass>PUBLICLAW</granuleClass>
    <law congress="117" number="169" isPrivate="false"/>
    <bill congress="117" type="HR" number="5376" priority="primary"/>
    <searchTitle>An Act to provide for reconciliation pursuant to title II of S. Con. Res. 14.</searchTitle>
    <shortTitle type="popular">Inflation Reduction Act of 2022</shortTitle>
  </extension>
  <extension>
    <law congress="117" number="169" isPrivate="false"/>
    <bill congress="117" type="S" number="2" priority="secondary"/>
  </extension>
</mods>
"""


@pytest.fixture
def statute_mods() -> bytes:
    """MODS record repeating the same law reference in two extensions."""
    return STATUTE_MODS


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Factory for an AsyncClient whose requests are answered by a handler."""
    def make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return make
