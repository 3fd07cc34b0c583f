import asyncio
import logging
from typing import Any

import httpx

from legislink_core.config import Environment
from legislink_core.expansion import legisworks_link
from legislink_core.ledger import Ledger, volumes_for_congress
from legislink_core.models import Citation, LedgerEntry
from legislink_core.resolvers.base import SourceResolver, get_link

logger = logging.getLogger(__name__)


class LegisworksLawResolver(SourceResolver):
    """Statutes at Large page and scan for laws of the 60th-81st Congresses.

    These laws predate GovInfo's law packages. The historical ledger records
    each law's congress and number, so a law citation can be mapped back to
    the volume and page it was printed on."""

    name = "legisworks"

    def __init__(self, registry, ledger: Ledger):
        super().__init__(registry)
        self.ledger = ledger

    def applies(self, part, citation, env) -> bool:
        if get_link(part, "usgpo", "mods"):
            return False
        try:
            return bool(volumes_for_congress(int(part.get("congress"))))
        except (TypeError, ValueError):
            return False

    async def resolve(
        self,
        part: dict[str, Any],
        citation: Citation,
        env: Environment,
        http: httpx.AsyncClient,
    ) -> list[Citation]:
        matches = await asyncio.to_thread(self._find, part)
        if not matches:
            return []

        cites = []
        for entry in matches:
            citation.title = entry.display_title
            part.setdefault("links", {})["legisworks"] = legisworks_link(entry)
            # The stat citation gets no legisworks link of its own: it would
            # point at the scan already linked from the law
            cites.append(self.registry.create_citation("stat", {
                "volume": entry.volume,
                "page": entry.page,
            }))
        return cites

    def _find(self, part: dict[str, Any]) -> list[LedgerEntry]:
        # Every volume is read before the citation is touched, so a missing
        # volume file leaves the citation unchanged
        congress, number = int(part["congress"]), int(part["number"])
        law_type = part.get("type", "public")
        matches = []
        for volume in volumes_for_congress(congress):
            matches.extend(self.ledger.query_law(volume, congress, number, law_type))
        logger.debug("Ledger matches for law %s-%s: %d", congress, number, len(matches))
        return matches
