import logging
from typing import Any
from urllib.parse import urlsplit

import httpx

from legislink_core.citation_types import COURTLISTENER_SOURCE
from legislink_core.config import Environment
from legislink_core.exceptions import LegislinkError
from legislink_core.models import Citation
from legislink_core.resolvers.base import SourceResolver, fetch, get_link, raise_for_status

logger = logging.getLogger(__name__)

SEARCH_URL = "https://www.courtlistener.com/api/rest/v3/search/"
SITE_URL = "https://www.courtlistener.com"


class CourtListenerSearchResolver(SourceResolver):
    """Case name, court and direct link for reporter citations.

    Runs the query of the citation's CourtListener search link against the
    authenticated search API. Only a single unambiguous hit updates the
    citation; with several hits the search link is kept so the reader can
    choose."""

    name = "courtlistener"

    def applies(self, part, citation, env) -> bool:
        return env.courtlistener is not None and bool(get_link(part, "courtlistener", "landing"))

    async def resolve(
        self,
        part: dict[str, Any],
        citation: Citation,
        env: Environment,
        http: httpx.AsyncClient,
    ) -> list[Citation]:
        query = urlsplit(get_link(part, "courtlistener", "landing")).query
        credentials = env.courtlistener
        try:
            response = await fetch(
                http,
                f"{SEARCH_URL}?{query}",
                auth=(credentials.username, credentials.password),
            )
            raise_for_status(response)
            cases = response.json()["results"]
        except (LegislinkError, ValueError, KeyError, TypeError) as e:
            logger.debug("CourtListener search failed for %s: %s", citation.citation, e)
            return []

        if len(cases) != 1:
            logger.debug("CourtListener returned %d results for %s", len(cases), citation.citation)
            return []

        case = cases[0]
        try:
            landing = SITE_URL + case["absolute_url"]
            canonical = case["citation"][0]
        except (KeyError, IndexError, TypeError):
            return []

        citation.title = case.get("caseName")
        citation.type_name = case.get("court")
        # The parser's reporter strings are not normalized; CourtListener's are
        citation.citation = canonical
        part["links"]["courtlistener"] = {
            "source": dict(COURTLISTENER_SOURCE),
            "landing": landing,
        }
        return []
