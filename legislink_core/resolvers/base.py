from abc import ABC, abstractmethod
from typing import Any

import httpx

from legislink_core.citation_types import CitationTypeRegistry
from legislink_core.config import Environment
from legislink_core.exceptions import TransportError
from legislink_core.models import Citation


class SourceResolver(ABC):
    """Base for parallel citation sources.

    A resolver receives the payload of the sub-type it handles ("part"), the
    whole citation, and the environment. It returns newly found parallel
    citations and may update the citation in place, restricted to the links
    of its own part and the citation's title/citation fields."""

    name: str = ""

    def __init__(self, registry: CitationTypeRegistry):
        self.registry = registry

    @abstractmethod
    def applies(self, part: dict[str, Any], citation: Citation, env: Environment) -> bool:
        """Whether this source can say anything about the part."""
        pass

    @abstractmethod
    async def resolve(
        self,
        part: dict[str, Any],
        citation: Citation,
        env: Environment,
        http: httpx.AsyncClient,
    ) -> list[Citation]:
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


def get_link(part: dict[str, Any], source: str, kind: str) -> Any:
    """part["links"][source][kind], or None if any level is missing."""
    link = (part.get("links") or {}).get(source)
    if not link:
        return None
    return link.get(kind)


async def fetch(http: httpx.AsyncClient, url: str, **kwargs: Any) -> httpx.Response:
    """
    GET a URL, translating transport failures into TransportError.

    Status codes are NOT checked here; callers decide which ones matter.
    """
    try:
        return await http.get(url, **kwargs)
    except httpx.HTTPError as e:
        raise TransportError(url, str(e) or type(e).__name__) from e


def raise_for_status(response: httpx.Response) -> None:
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise TransportError(str(response.request.url), f"HTTP {response.status_code}") from e
