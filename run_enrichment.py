#!/usr/bin/env python3
# run_enrichment.py
"""
CLI for citation expansion and parallel citation lookup.

Usage:
    python run_enrichment.py --stat 43 1
    python run_enrichment.py --law 117 169 --output law.json

Output:
    - Console panels for each candidate citation and its parallel citations
    - Optional JSON file with the complete results

Design:
    - Step 1: Ambiguous Statutes at Large citations are exploded via the ledger
    - Step 2: Source resolvers run concurrently for every candidate
"""
import argparse
import json
import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from legislink_core.citation_types import CitationTypeRegistry, default_registry
from legislink_core.config import load_environment
from legislink_core.display import display_results, results_to_json
from legislink_core.exceptions import LegislinkError
from legislink_core.ledger import Ledger
from legislink_core.models import Citation
from legislink_core.orchestrator import enrich_citation

load_dotenv()
console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Expand a legal citation and find its parallel citations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python run_enrichment.py --stat 43 1
    python run_enrichment.py --law 67 1
    python run_enrichment.py --usc 26 48
    python run_enrichment.py --reporter 410 U.S. 113 --output roe.json
        """
    )
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--stat", nargs=2, metavar=("VOLUME", "PAGE"),
                       help="Statutes at Large citation")
    group.add_argument("--law", nargs=2, metavar=("CONGRESS", "NUMBER"),
                       help="Public (or, with --private, private) law")
    group.add_argument("--usc", nargs=2, metavar=("TITLE", "SECTION"),
                       help="U.S. Code section")
    group.add_argument("--cfr", nargs="+", metavar="N",
                       help="CFR citation: TITLE PART [SECTION]")
    group.add_argument("--fedreg", nargs=2, metavar=("VOLUME", "PAGE"),
                       help="Federal Register citation")
    group.add_argument("--bill", nargs=3, metavar=("CONGRESS", "TYPE", "NUMBER"),
                       help="Bill or resolution (type: hr, s, hjres, ...)")
    group.add_argument("--reporter", nargs=3, metavar=("VOLUME", "REPORTER", "PAGE"),
                       help="Case reporter citation")
    group.add_argument("--json", dest="json_file",
                       help="File holding a serialized citation")

    parser.add_argument("--private", action="store_true", help="With --law: private law")
    parser.add_argument("--config", default="config.yaml",
                        help="Config file (default: config.yaml)")
    parser.add_argument("--ledger-dir", help="Directory of the historical ledger YAML files")
    parser.add_argument("--no-parallel", action="store_true",
                        help="Only expand ambiguous citations, skip source lookups")
    parser.add_argument("--output", help="Write results as JSON to this file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show resolver logging")
    return parser


def build_citation(args: argparse.Namespace, registry: Optional[CitationTypeRegistry] = None) -> Citation:
    """Turn the citation arguments into a Citation."""
    registry = registry or default_registry()

    if args.json_file:
        with open(args.json_file, "r", encoding="utf-8") as f:
            return Citation.from_dict(json.load(f))
    if args.stat:
        volume, page = args.stat
        return registry.create_citation("stat", {"volume": int(volume), "page": page})
    if args.law:
        congress, number = args.law
        return registry.create_citation("law", {
            "congress": int(congress),
            "type": "private" if args.private else "public",
            "number": int(number),
        })
    if args.usc:
        title, section = args.usc
        return registry.create_citation("usc", {"title": title, "section": section})
    if args.cfr:
        if len(args.cfr) not in (2, 3):
            raise ValueError("--cfr takes TITLE PART [SECTION]")
        fields = {"title": args.cfr[0], "part": args.cfr[1]}
        if len(args.cfr) == 3:
            fields["section"] = args.cfr[2]
        return registry.create_citation("cfr", fields)
    if args.fedreg:
        volume, page = args.fedreg
        return registry.create_citation("fedreg", {"volume": int(volume), "page": int(page)})
    if args.bill:
        congress, bill_type, number = args.bill
        return registry.create_citation("us_bill", {
            "congress": int(congress),
            "bill_type": bill_type.lower(),
            "number": int(number),
        })
    volume, reporter, page = args.reporter
    return registry.create_citation("reporter", {"volume": volume, "reporter": reporter, "page": page})


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    env = load_environment(args.config)
    ledger_dir = args.ledger_dir or env.ledger_dir

    registry = default_registry()
    try:
        citation = build_citation(args, registry)
    except (OSError, ValueError, KeyError, LegislinkError) as e:
        console.print(f"[red]Error: invalid citation: {e}[/red]")
        return 1

    if not os.path.isdir(ledger_dir):
        console.print(f"[dim]Ledger directory not found: {ledger_dir}[/dim]")

    console.print(f"\n[cyan]Resolving {citation.citation}...[/cyan]")
    try:
        results = enrich_citation(
            citation,
            env,
            ledger=Ledger(ledger_dir),
            registry=registry,
            parallel=not args.no_parallel,
        )
    except LegislinkError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    console.print("\n[green]✓ Resolution complete[/green]")
    display_results(results, out=console)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(results_to_json(results), f, indent=2)
        console.print(f"\n[green]✓ Results saved to {args.output}[/green]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
