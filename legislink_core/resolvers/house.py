import logging
from typing import Any

import httpx

from legislink_core.config import Environment
from legislink_core.models import Citation
from legislink_core.resolvers.base import SourceResolver, fetch, get_link

logger = logging.getLogger(__name__)


class HouseSectionValidator(SourceResolver):
    """Drops U.S. Code links for sections that do not exist.

    Dashes in section numbers can be part of the number or mark a range, so
    the parser may produce sections that do not exist. The House OLRC site is
    always current (GovInfo only carries published editions), and answers a
    missing section with a redirect to a "document not found" page instead of
    a 200."""

    name = "house"

    def applies(self, part, citation, env) -> bool:
        return bool(get_link(part, "house", "html"))

    async def resolve(
        self,
        part: dict[str, Any],
        citation: Citation,
        env: Environment,
        http: httpx.AsyncClient,
    ) -> list[Citation]:
        url = get_link(part, "house", "html")
        response = await fetch(http, url, follow_redirects=False)
        if response.status_code != 200:
            logger.info("U.S. Code section not found at OLRC (HTTP %s): %s", response.status_code, url)
            # Drops every source for the section, not only OLRC
            part.pop("links", None)
        return []
