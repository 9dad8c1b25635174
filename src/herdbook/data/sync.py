"""
Sync the animal registry from the farm backend to a local JSON file.

The cache holds every animal (active or not) with its recorded sire and
dam, so pedigrees can be analysed offline with `--cache`.

Usage:
    uv run herdbook sync                    # Syncs to .cache/animals.json
    uv run herdbook sync -o custom.json     # Custom output path
"""

import json
from datetime import datetime
from pathlib import Path

from herdbook.core import get_all_animal_records, settings

DEFAULT_CACHE_FILE = "animals.json"


def build_cache(records: list[dict]) -> dict:
    """Assemble the cache document for a list of AnimalDTO records."""
    with_sire = sum(1 for r in records if r.get("padreId"))
    with_dam = sum(1 for r in records if r.get("madreId"))

    data = {
        "exported_at": datetime.now().isoformat(),
        "source": settings.herdbook_api_url,
        "summary": {
            "total_animals": len(records),
            "active_animals": sum(1 for r in records if r.get("activo", True)),
            "with_sire": with_sire,
            "with_dam": with_dam,
        },
        "animals": records,
    }

    # Indices for lookup by tag/name when only a label is known
    data["indices"] = {
        "by_tag": {},
        "by_name": {},
    }
    for i, r in enumerate(records):
        if r.get("numeroIdentificacion"):
            data["indices"]["by_tag"][r["numeroIdentificacion"].lower()] = i
        if r.get("nombre"):
            data["indices"]["by_name"][r["nombre"].lower()] = i

    return data


async def sync_animals(output_path: Path) -> dict:
    """Download the whole registry and write it to `output_path`."""
    print("=" * 60)
    print("Animal Registry Sync")
    print("=" * 60)
    print()

    print("Fetching animals from the farm backend...")
    records = await get_all_animal_records()
    print(f"  Found {len(records)} animals total")

    data = build_cache(records)
    summary = data["summary"]
    print(f"  {summary['with_sire']} with recorded sire, {summary['with_dam']} with recorded dam")

    print()
    print(f"Writing to {output_path}...")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(data, f, indent=2, default=str)

    size_mb = output_path.stat().st_size / (1024 * 1024)
    print(f"  Wrote {size_mb:.2f} MB")
    print()
    print("Done! Pedigrees can now be analysed locally.")
    print(f"  File: {output_path}")

    return data
