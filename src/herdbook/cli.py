"""Command-line pedigree tools.

Usage:
    uv run herdbook tree 42 --generations 4
    uv run herdbook coefficient 42 --json
    uv run herdbook coefficient 42 --cache .cache/animals.json   # offline
    uv run herdbook tree A-001 --cache .cache/animals.json       # by ear tag
    uv run herdbook sync
"""

import argparse
import asyncio
import json
import logging
from pathlib import Path

from herdbook.core import get_cache_dir, settings
from herdbook.data.directory import AnimalDirectory, AnimalNotFoundError, ApiDirectory, InMemoryDirectory
from herdbook.data.sync import DEFAULT_CACHE_FILE, sync_animals
from herdbook.pedigree import Pedigree, inbreeding
from herdbook.reports.lineage import (
    build_coefficient_report,
    build_tree_report,
    format_consanguinity,
    format_pedigree_tree,
    get_active_tree,
    validate_generations,
)


def _directory(cache: str | None) -> AnimalDirectory:
    if cache:
        return InMemoryDirectory.from_cache(Path(cache))
    return ApiDirectory()


def _animal_id(directory: AnimalDirectory, identifier: str) -> int:
    """Resolve a command-line animal argument. Tags and names need a cache."""
    if isinstance(directory, InMemoryDirectory):
        return directory.find(identifier).id
    return int(identifier)


async def cli_main() -> None:
    """CLI entry point for pedigree analysis."""
    parser = argparse.ArgumentParser(description="Pedigree analysis for the farm animal registry")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # tree command
    tree_parser = subparsers.add_parser("tree", help="Show an animal's ancestor tree")
    tree_parser.add_argument("animal", help="Animal ID (tag or name with --cache)")
    tree_parser.add_argument(
        "--generations", type=int, default=settings.default_generations, help="Generations to fetch"
    )
    tree_parser.add_argument("--cache", help="Use a synced cache file instead of the API")
    tree_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # coefficient command
    coef_parser = subparsers.add_parser("coefficient", help="Compute an animal's inbreeding coefficient")
    coef_parser.add_argument("animal", help="Animal ID (tag or name with --cache)")
    coef_parser.add_argument(
        "--generations", type=int, default=settings.default_coefficient_generations, help="Generations to search"
    )
    coef_parser.add_argument("--cache", help="Use a synced cache file instead of the API")
    coef_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # sync command - download the registry to local JSON
    sync_parser = subparsers.add_parser("sync", help="Download all animals to a local cache")
    sync_parser.add_argument("--output", "-o", type=str, help="Output file path")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    if args.command in ("tree", "coefficient"):
        try:
            generations = validate_generations(args.generations)
        except ValueError as e:
            parser.error(str(e))

        if not args.cache and not args.animal.isdigit():
            parser.error(f"'{args.animal}' is not an animal ID (use --cache to look up tags and names)")

        directory = _directory(args.cache)
        pedigree = Pedigree(directory)

        try:
            animal_id = _animal_id(directory, args.animal)

            if args.command == "tree" and args.json:
                report = await build_tree_report(pedigree, animal_id, generations)
                print(json.dumps(report, indent=2, default=str))
            elif args.command == "tree":
                tree = await get_active_tree(pedigree, animal_id, generations)
                print(format_pedigree_tree(tree))
            elif args.json:
                report = await build_coefficient_report(pedigree, animal_id, generations)
                print(json.dumps(report, indent=2, default=str))
            else:
                tree = await get_active_tree(pedigree, animal_id, generations)
                labels = {node.id: node.animal.label for node in tree.walk()}
                print(format_consanguinity(tree.animal, inbreeding(tree), labels))
        except AnimalNotFoundError as e:
            print(f"Error: {e}")
            raise SystemExit(1) from e

    elif args.command == "sync":
        output_path = Path(args.output) if args.output else get_cache_dir() / DEFAULT_CACHE_FILE
        await sync_animals(output_path)

    else:
        parser.print_help()


def cli() -> None:
    """Sync CLI entry point."""
    asyncio.run(cli_main())


if __name__ == "__main__":
    cli()
