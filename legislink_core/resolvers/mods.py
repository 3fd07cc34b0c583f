"""
GovInfo MODS metadata resolver.

GovInfo publishes a MODS XML record for every Statutes at Large granule,
public/private law package, CFR part and Federal Register document. The
<extension> blocks of those records carry:

- <law congress= number= isPrivate=>     parallel law of a statute
- <bill congress= type= number= priority=>  originating bill of a statute/law
- <shortTitle> / <searchTitle>          title of the instrument

Only bills marked priority="primary" are used. GovInfo does not document
whether "primary" always means the originating bill rather than any bill
mentioned in the statute, so nothing more is inferred from it.
"""
import logging
from typing import Any, Optional

import httpx
from lxml import etree

from legislink_core.config import Environment
from legislink_core.exceptions import ParseError
from legislink_core.models import Citation
from legislink_core.resolvers.base import SourceResolver, fetch, get_link, raise_for_status

logger = logging.getLogger(__name__)

# Citation types whose MODS records reference parallel laws and bills
LEGISLATIVE_TYPES = ("stat", "law")

_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)


def parse_mods(content: bytes, source: str) -> etree._Element:
    try:
        root = etree.fromstring(content, parser=_PARSER)
    except etree.XMLSyntaxError as e:
        raise ParseError(source, str(e)) from e
    if root is None:
        raise ParseError(source, "empty document")
    return root


def _children(element: etree._Element, name: str) -> list[etree._Element]:
    """Direct children by local name, ignoring the MODS namespace."""
    return [
        child for child in element
        if isinstance(child.tag, str) and etree.QName(child).localname == name
    ]


def _text(element: etree._Element) -> str:
    return "".join(element.itertext()).strip()


class ModsResolver(SourceResolver):
    """Parallel laws, originating bills and titles from GovInfo MODS."""

    name = "usgpo"

    def applies(self, part, citation, env) -> bool:
        return bool(get_link(part, "usgpo", "mods"))

    async def resolve(
        self,
        part: dict[str, Any],
        citation: Citation,
        env: Environment,
        http: httpx.AsyncClient,
    ) -> list[Citation]:
        url = get_link(part, "usgpo", "mods")
        response = await fetch(http, url, follow_redirects=True)
        raise_for_status(response)
        root = parse_mods(response.content, url)

        # MODS repeats the same references across extension blocks
        seen = known_ids(citation)
        cites: list[Citation] = []
        title: Optional[str] = None

        for extension in _children(root, "extension"):
            if citation.type in LEGISLATIVE_TYPES:
                for reference in (self._law_reference(extension), self._bill_reference(extension)):
                    if reference is None or reference.id in seen:
                        continue
                    seen.add(reference.id)
                    cites.append(reference)

            title = self._title(extension) or title

        # The stat and law parts of one citation resolve concurrently; only
        # the citation's own part may replace a title that is already set
        if title and (part is citation.parts.get(citation.type) or not citation.title):
            citation.title = title
        return cites

    def _law_reference(self, extension: etree._Element) -> Optional[Citation]:
        laws = _children(extension, "law")
        if not laws:
            return None
        elem = laws[0]
        try:
            return self.registry.create_citation("law", {
                "congress": int(elem.get("congress")),
                "type": "private" if elem.get("isPrivate") == "true" else "public",
                "number": int(elem.get("number")),
            })
        except (TypeError, ValueError):
            logger.debug("Skipping malformed MODS law reference: %s", dict(elem.attrib))
            return None

    def _bill_reference(self, extension: etree._Element) -> Optional[Citation]:
        bills = _children(extension, "bill")
        if not bills:
            return None
        elem = bills[0]
        if elem.get("priority") != "primary":
            return None
        try:
            return self.registry.create_citation("us_bill", {
                "is_enacted": True,
                "congress": int(elem.get("congress")),
                "bill_type": elem.get("type").lower(),
                "number": int(elem.get("number")),
            })
        except (AttributeError, TypeError, ValueError):
            logger.debug("Skipping malformed MODS bill reference: %s", dict(elem.attrib))
            return None

    @staticmethod
    def _title(extension: etree._Element) -> Optional[str]:
        for name in ("shortTitle", "searchTitle"):
            elements = _children(extension, name)
            if elements:
                return _text(elements[0]) or None
        return None


def known_ids(citation: Citation) -> set[str]:
    """Ids the citation already carries, itself or as attached parallels."""
    ids = {payload["id"] for payload in citation.parts.values() if payload.get("id")}
    for parallel in citation.parallel_citations:
        ids |= known_ids(parallel)
    return ids
