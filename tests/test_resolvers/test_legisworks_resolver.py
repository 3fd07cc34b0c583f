"""
Tests for LegisworksLawResolver.

Validates:
- Law -> volume mapping and congress/number lookup
- Link and title updates on the law citation
- No partial updates when a volume file is missing
"""
import httpx
import pytest

from legislink_core.exceptions import DataNotFound
from legislink_core.resolvers import LegisworksLawResolver


def law(registry, congress, number, law_type="public"):
    return registry.create_citation("law", {"congress": congress, "type": law_type, "number": number})


@pytest.fixture
def resolver(registry, ledger):
    return LegisworksLawResolver(registry, ledger)


@pytest.fixture
def no_http():
    def handler(request):
        raise AssertionError(f"unexpected request to {request.url}")
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestApplies:

    def test_historical_congress(self, registry, resolver, env):
        cite = law(registry, 67, 1)
        assert resolver.applies(cite.part("law"), cite, env)

    def test_outside_table(self, registry, resolver, env):
        cite = law(registry, 90, 1)
        assert not resolver.applies(cite.part("law"), cite, env)
        cite = law(registry, 59, 1)
        assert not resolver.applies(cite.part("law"), cite, env)

    def test_usgpo_link_takes_precedence(self, registry, resolver, env):
        cite = law(registry, 67, 1)
        cite.part("law")["links"]["usgpo"] = {"source": {}, "mods": "https://www.govinfo.gov/x/mods.xml"}
        assert not resolver.applies(cite.part("law"), cite, env)


@pytest.mark.asyncio
async def test_match_adds_link_title_and_statute(registry, resolver, env, no_http):
    cite = law(registry, 67, 1)
    async with no_http as http:
        cites = await resolver.resolve(cite.part("law"), cite, env, http)

    assert [c.citation for c in cites] == ["42 Stat. 5"]
    assert cites[0].id == "stat/42/5"
    assert cite.title == "Emergency Tariff Act"
    link = cite.part("law")["links"]["legisworks"]
    assert link["pdf"] == "https://govtrackus.s3.amazonaws.com/legislink/pdf/stat/42/c1.pdf"
    assert link["source"]["authoritative"] is False


@pytest.mark.asyncio
async def test_private_law_not_resolved(registry, resolver, env, no_http):
    cite = law(registry, 67, 1, law_type="private")
    async with no_http as http:
        cites = await resolver.resolve(cite.part("law"), cite, env, http)

    assert cites == []
    assert "legisworks" not in cite.part("law")["links"]
    assert cite.title is None


@pytest.mark.asyncio
async def test_no_match_leaves_citation_alone(registry, resolver, env, no_http):
    cite = law(registry, 67, 400)
    async with no_http as http:
        assert await resolver.resolve(cite.part("law"), cite, env, http) == []
    assert cite.part("law")["links"] == {}


@pytest.mark.asyncio
async def test_missing_volume_raises_before_any_update(registry, resolver, env, no_http):
    # Congress 75 spans volumes 50-52; only 050.yaml exists
    cite = law(registry, 75, 1)
    async with no_http as http:
        with pytest.raises(DataNotFound):
            await resolver.resolve(cite.part("law"), cite, env, http)

    assert cite.title is None
    assert cite.part("law")["links"] == {}
