import re
from typing import Any

import httpx

from legislink_core.config import Environment
from legislink_core.exceptions import ParseError
from legislink_core.models import Citation
from legislink_core.resolvers.base import SourceResolver, fetch, get_link, raise_for_status

# Where the GovTrack search page lands when the query names exactly one bill
BILL_URL_PATTERN = re.compile(r"^https://www\.govtrack\.us/congress/bills/(\d+)/([a-z]+)(\d+)$")


class GovTrackLandingResolver(SourceResolver):
    """Originating bill of a law via the GovTrack search page.

    The law's GovTrack link is a search page. If the search redirects to a
    single bill, the bill's JSON record gives the bill citation and the
    law's title, and the search link is dropped in favor of the bill's own
    link on the new parallel citation."""

    name = "govtrack"

    def __init__(self, registry, is_enacted: bool = True):
        super().__init__(registry)
        self.is_enacted = is_enacted

    def applies(self, part, citation, env) -> bool:
        return bool(get_link(part, "govtrack", "landing"))

    async def resolve(
        self,
        part: dict[str, Any],
        citation: Citation,
        env: Environment,
        http: httpx.AsyncClient,
    ) -> list[Citation]:
        response = await fetch(http, get_link(part, "govtrack", "landing"), follow_redirects=True)
        bill_url = str(response.url)
        m = BILL_URL_PATTERN.match(bill_url)
        if not m:
            # Search did not resolve to a single bill
            return []

        # GovTrack serves the bill's API record at the same path + .json
        record_response = await fetch(http, bill_url + ".json", follow_redirects=True)
        raise_for_status(record_response)
        try:
            bill = record_response.json()
            bill_cite = self.registry.create_citation("us_bill", {
                "is_enacted": self.is_enacted,
                "congress": int(bill["congress"]),
                # The type code is only in the URL, not the API record
                "bill_type": m.group(2),
                "number": int(bill["number"]),
                "title": bill.get("title"),
            })
        except (ValueError, KeyError, TypeError) as e:
            raise ParseError(bill_url + ".json", str(e)) from e

        if bill.get("title_without_number"):
            citation.title = bill["title_without_number"]
        part["links"].pop("govtrack", None)
        return [bill_cite]
