"""
Parallel citation orchestration.

Runs the applicable source resolvers for a citation concurrently and
collects the parallel citations they find. Also hosts the enrich() pipeline
that first explodes ambiguous statute citations and then resolves every
candidate.

Design:
- Strategies are injected (sub-type -> ordered resolver list), not looked up
  from module state
- One asyncio task per sub-type present on the citation, joined with gather
- A failing resolver contributes nothing; the others are unaffected
- Output order follows RESOLUTION_ORDER, so it is deterministic for
  deterministic resolver outputs

Usage:
    env = load_environment()
    results = enrich_citation(citation, env)
    for result in results:
        print(result.citation.citation, [c.citation for c in result.parallel_citations])
"""
import asyncio
import logging
from typing import Any, Optional

import httpx

from legislink_core.citation_types import CitationTypeRegistry, default_registry
from legislink_core.config import Environment
from legislink_core.expansion import explode
from legislink_core.ledger import Ledger
from legislink_core.models import Citation, EnrichmentResult
from legislink_core.resolvers import SourceResolver, Strategies, build_default_strategies

logger = logging.getLogger(__name__)

RESOLUTION_ORDER: tuple[str, ...] = ("stat", "law", "usc", "cfr", "fedreg", "reporter")


def create_http_client(env: Environment) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(env.timeout),
        headers={"User-Agent": env.user_agent},
    )


class ParallelCitationOrchestrator:
    """
    Concurrent fan-out over source resolvers.

    Each resolver only writes the links of its own sub-type payload (plus the
    title/citation of the citation it resolves), so the concurrent tasks need
    no locking.
    """

    def __init__(self, strategies: Strategies):
        self.strategies = strategies

    def select(self, part_type: str, citation: Citation, env: Environment) -> Optional[SourceResolver]:
        """First resolver for the sub-type that applies, or None."""
        part = citation.part(part_type)
        for resolver in self.strategies.get(part_type, []):
            if resolver.applies(part, citation, env):
                return resolver
        return None

    async def add_parallel_citations(
        self,
        citation: Citation,
        env: Environment,
        http: Optional[httpx.AsyncClient] = None,
    ) -> list[Citation]:
        """
        Find parallel citations for a resolved citation.

        Args:
            citation: Citation to resolve; may be updated in place
            env: Credentials and HTTP settings
            http: Client to use (default: a new client for this call)

        Returns:
            New parallel citations, in RESOLUTION_ORDER of the sub-types
        """
        if http is None:
            async with create_http_client(env) as client:
                return await self.add_parallel_citations(citation, env, client)

        tasks = []
        for part_type in RESOLUTION_ORDER:
            if part_type not in citation:
                continue
            resolver = self.select(part_type, citation, env)
            if resolver is None:
                continue
            tasks.append(self._run(resolver, part_type, citation, env, http))

        results = await asyncio.gather(*tasks)
        return [cite for cites in results for cite in cites]

    async def _run(
        self,
        resolver: SourceResolver,
        part_type: str,
        citation: Citation,
        env: Environment,
        http: httpx.AsyncClient,
    ) -> list[Citation]:
        try:
            return await resolver.resolve(citation.part(part_type), citation, env, http)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning(
                "%s resolver failed for %s: %s",
                resolver.name, citation.citation or citation.id, e,
            )
            return []


async def enrich(
    citation: Citation,
    env: Environment,
    ledger: Optional[Ledger] = None,
    registry: Optional[CitationTypeRegistry] = None,
    orchestrator: Optional[ParallelCitationOrchestrator] = None,
    http: Optional[httpx.AsyncClient] = None,
    parallel: bool = True,
) -> list[EnrichmentResult]:
    """
    Explode a citation into candidates and resolve each one.

    Args:
        citation: Parsed citation
        env: Credentials and HTTP settings
        ledger: Historical ledger (default: Ledger(env.ledger_dir))
        registry: Citation type registry (default: default_registry())
        orchestrator: Resolver fan-out (default: built from the default strategies)
        http: Shared client (default: a new client for this call)
        parallel: Run the source resolvers (False = expansion only)

    Returns:
        One EnrichmentResult per candidate citation

    Raises:
        DataNotFound: If the citation needs the ledger and its volume file is missing
    """
    ledger = ledger or Ledger(env.ledger_dir)
    registry = registry or default_registry()
    candidates = await asyncio.to_thread(explode, citation, ledger, registry)

    if not parallel:
        return [EnrichmentResult(citation=c) for c in candidates]

    orchestrator = orchestrator or ParallelCitationOrchestrator(build_default_strategies(ledger, registry))

    if http is None:
        async with create_http_client(env) as client:
            return await _resolve_candidates(orchestrator, candidates, env, client)
    return await _resolve_candidates(orchestrator, candidates, env, http)


async def _resolve_candidates(
    orchestrator: ParallelCitationOrchestrator,
    candidates: list[Citation],
    env: Environment,
    http: httpx.AsyncClient,
) -> list[EnrichmentResult]:
    found = await asyncio.gather(*[
        orchestrator.add_parallel_citations(candidate, env, http)
        for candidate in candidates
    ])
    return [
        EnrichmentResult(citation=candidate, parallel_citations=parallels)
        for candidate, parallels in zip(candidates, found)
    ]


def enrich_citation(citation: Citation, env: Environment, **kwargs: Any) -> list[EnrichmentResult]:
    """Synchronous wrapper around enrich() for scripts."""
    return asyncio.run(enrich(citation, env, **kwargs))
