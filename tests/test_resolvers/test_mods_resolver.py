"""
Tests for ModsResolver.

Validates:
- Parallel law and primary bill extraction from GovInfo MODS
- Deduplication of repeated references within one record
- Title selection
- Parse and transport failures
"""
import httpx
import pytest

from legislink_core.exceptions import ParseError, TransportError
from legislink_core.resolvers import ModsResolver


@pytest.fixture
def statute(registry):
    return registry.create_citation("stat", {"volume": 136, "page": 1818})


def mods_handler(body: bytes, status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.host == "www.govinfo.gov"
        return httpx.Response(status, content=body)
    return handler


class TestApplies:

    def test_applies_with_mods_link(self, registry, statute, env):
        assert ModsResolver(registry).applies(statute.part("stat"), statute, env)

    def test_not_applicable_without_usgpo(self, registry, env):
        cite = registry.create_citation("stat", {"volume": 43, "page": 1})
        assert not ModsResolver(registry).applies(cite.part("stat"), cite, env)


@pytest.mark.network
@pytest.mark.asyncio
async def test_duplicate_law_references_yield_one_citation(registry, statute, env, statute_mods, mock_http):
    async with mock_http(mods_handler(statute_mods)) as http:
        cites = await ModsResolver(registry).resolve(statute.part("stat"), statute, env, http)

    laws = [c for c in cites if c.type == "law"]
    assert len(laws) == 1
    assert laws[0].id == "us-law/public/117/169"


@pytest.mark.network
@pytest.mark.asyncio
async def test_only_primary_bill_used(registry, statute, env, statute_mods, mock_http):
    async with mock_http(mods_handler(statute_mods)) as http:
        cites = await ModsResolver(registry).resolve(statute.part("stat"), statute, env, http)

    bills = [c for c in cites if c.type == "us_bill"]
    assert [b.id for b in bills] == ["us-bill/117/hr/5376"]
    assert bills[0].part("us_bill")["is_enacted"] is True
    assert [c.type for c in cites] == ["law", "us_bill"]


@pytest.mark.network
@pytest.mark.asyncio
async def test_short_title_preferred_over_search_title(registry, statute, env, statute_mods, mock_http):
    async with mock_http(mods_handler(statute_mods)) as http:
        await ModsResolver(registry).resolve(statute.part("stat"), statute, env, http)

    assert statute.title == "Inflation Reduction Act of 2022"


@pytest.mark.network
@pytest.mark.asyncio
async def test_search_title_used_when_no_short_title(registry, statute, env, mock_http):
    body = b"""<mods xmlns="http://www.loc.gov/mods/v3">
      <extension><searchTitle>Making appropriations for the Department of Defense</searchTitle></extension>
    </mods>"""
    async with mock_http(mods_handler(body)) as http:
        cites = await ModsResolver(registry).resolve(statute.part("stat"), statute, env, http)

    assert cites == []
    assert statute.title == "Making appropriations for the Department of Defense"


@pytest.mark.network
@pytest.mark.asyncio
async def test_private_law_reference(registry, statute, env, mock_http):
    body = b"""<mods xmlns="http://www.loc.gov/mods/v3">
      <extension><law congress="115" number="2" isPrivate="true"/></extension>
    </mods>"""
    async with mock_http(mods_handler(body)) as http:
        cites = await ModsResolver(registry).resolve(statute.part("stat"), statute, env, http)

    assert [c.id for c in cites] == ["us-law/private/115/2"]


@pytest.mark.network
@pytest.mark.asyncio
async def test_regulation_gets_title_but_no_law_references(registry, env, statute_mods, mock_http):
    cfr = registry.create_citation("cfr", {"title": "40", "part": "60"})
    async with mock_http(mods_handler(statute_mods)) as http:
        cites = await ModsResolver(registry).resolve(cfr.part("cfr"), cfr, env, http)

    assert cites == []
    assert cfr.title == "Inflation Reduction Act of 2022"


@pytest.mark.network
@pytest.mark.asyncio
async def test_law_does_not_cite_itself(registry, env, statute_mods, mock_http):
    law = registry.create_citation("law", {"congress": 117, "type": "public", "number": 169})
    async with mock_http(mods_handler(statute_mods)) as http:
        cites = await ModsResolver(registry).resolve(law.part("law"), law, env, http)

    assert [c.id for c in cites] == ["us-bill/117/hr/5376"]


@pytest.mark.network
@pytest.mark.asyncio
async def test_malformed_xml_raises_parse_error(registry, statute, env, mock_http):
    async with mock_http(mods_handler(b"<mods><extension>")) as http:
        with pytest.raises(ParseError):
            await ModsResolver(registry).resolve(statute.part("stat"), statute, env, http)
    assert statute.title is None


@pytest.mark.network
@pytest.mark.asyncio
async def test_http_error_raises_transport_error(registry, statute, env, mock_http):
    async with mock_http(mods_handler(b"Not Found", status=404)) as http:
        with pytest.raises(TransportError):
            await ModsResolver(registry).resolve(statute.part("stat"), statute, env, http)


@pytest.mark.network
@pytest.mark.asyncio
async def test_connection_error_raises_transport_error(registry, statute, env, mock_http):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with mock_http(handler) as http:
        with pytest.raises(TransportError):
            await ModsResolver(registry).resolve(statute.part("stat"), statute, env, http)


class TestTitlePrecedence:
    """A statute citation can carry a law part whose MODS record is fetched concurrently."""

    LAW_MODS = b"""<mods xmlns="http://www.loc.gov/mods/v3">
      <extension><shortTitle>Law Package Title</shortTitle></extension>
    </mods>"""

    @pytest.fixture
    def statute_with_law(self, registry, statute):
        statute.parts["law"] = registry.create_citation(
            "law", {"congress": 117, "type": "public", "number": 169}
        ).part("law")
        return statute

    @pytest.mark.network
    @pytest.mark.asyncio
    async def test_other_part_keeps_existing_title(self, registry, statute_with_law, env, mock_http):
        statute_with_law.title = "Inflation Reduction Act of 2022"
        async with mock_http(mods_handler(self.LAW_MODS)) as http:
            await ModsResolver(registry).resolve(statute_with_law.part("law"), statute_with_law, env, http)

        assert statute_with_law.title == "Inflation Reduction Act of 2022"

    @pytest.mark.network
    @pytest.mark.asyncio
    async def test_other_part_fills_missing_title(self, registry, statute_with_law, env, mock_http):
        async with mock_http(mods_handler(self.LAW_MODS)) as http:
            await ModsResolver(registry).resolve(statute_with_law.part("law"), statute_with_law, env, http)

        assert statute_with_law.title == "Law Package Title"

    @pytest.mark.network
    @pytest.mark.asyncio
    async def test_own_part_wins_in_either_order(self, registry, statute_with_law, env, statute_mods, mock_http):
        def handler(request):
            if "PLAW" in request.url.path:
                return httpx.Response(200, content=self.LAW_MODS)
            return httpx.Response(200, content=statute_mods)

        resolver = ModsResolver(registry)
        async with mock_http(handler) as http:
            await resolver.resolve(statute_with_law.part("law"), statute_with_law, env, http)
            await resolver.resolve(statute_with_law.part("stat"), statute_with_law, env, http)
            assert statute_with_law.title == "Inflation Reduction Act of 2022"

            await resolver.resolve(statute_with_law.part("law"), statute_with_law, env, http)
        assert statute_with_law.title == "Inflation Reduction Act of 2022"
