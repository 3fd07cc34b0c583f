from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from legislink_core.models import Citation, EnrichmentResult

console = Console()


def links_table(citation: Citation) -> Optional[Table]:
    """Table of every link on every part of a citation, or None if there are none."""
    rows = []
    for part_type, payload in citation.parts.items():
        for source_key, link in (payload.get("links") or {}).items():
            source = link.get("source", {})
            for kind in ("landing", "html", "pdf", "mods"):
                if link.get(kind):
                    rows.append((part_type, source, kind, link[kind]))

    if not rows:
        return None

    table = Table(show_header=True, show_lines=False)
    table.add_column("Part", style="cyan", width=8)
    table.add_column("Source", style="white", width=22)
    table.add_column("Kind", style="dim", width=7)
    table.add_column("Link", style="white", overflow="fold")

    for part_type, source, kind, url in rows:
        name = source.get("abbreviation") or source.get("name", "")
        if source.get("authoritative"):
            name = f"[green]{name}[/green]"
        if source.get("note"):
            name += f"\n[yellow]{source['note']}[/yellow]"
        table.add_row(part_type, name, kind, url)

    return table


def display_citation(citation: Citation, label: str = "Citation", out: Optional[Console] = None) -> None:
    """
    Display one citation as a panel with its links.

    Color Coding:
        - GREEN border: citation has at least one authoritative link
        - YELLOW border: citation carries disambiguation text (one of several candidates)
        - WHITE border: otherwise
    """
    out = out or console
    has_authoritative = any(
        link.get("source", {}).get("authoritative")
        for payload in citation.parts.values()
        for link in (payload.get("links") or {}).values()
    )
    if citation.disambiguation:
        border = "yellow"
    elif has_authoritative:
        border = "green"
    else:
        border = "white"

    lines = [
        f"[bold]{citation.citation or citation.id}[/bold]",
        f"[cyan]Type:[/cyan] {citation.type_name or citation.type}",
    ]
    if citation.title:
        lines.append(f"[cyan]Title:[/cyan] {citation.title}")
    if citation.disambiguation:
        lines.append(f"[cyan]Disambiguation:[/cyan] {citation.disambiguation}")
    for nested in citation.parallel_citations:
        lines.append(f"[cyan]Parallel:[/cyan] {nested.citation}")

    out.print(Panel("\n".join(lines), title=label, border_style=border))
    table = links_table(citation)
    if table is not None:
        out.print(table)


def display_results(results: list[EnrichmentResult], out: Optional[Console] = None) -> None:
    out = out or console
    if not results:
        out.print("[yellow]No citations to display.[/yellow]")
        return

    if len(results) > 1:
        out.print(f"[yellow]⚠ {len(results)} candidate citations match this reference[/yellow]")

    for idx, result in enumerate(results, 1):
        label = f"Candidate {idx}/{len(results)}" if len(results) > 1 else "Citation"
        display_citation(result.citation, label=label, out=out)
        for parallel in result.parallel_citations:
            display_citation(parallel, label="Parallel citation", out=out)


def results_to_json(results: list[EnrichmentResult]) -> list[dict[str, Any]]:
    return [result.to_dict() for result in results]
