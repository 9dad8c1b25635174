"""Animal directory: identity, sex and recorded parents of registry animals.

The pedigree code only ever asks one question of the registry - "who is
animal N and who are its sire and dam?" - so anything that can answer
`lookup(id)` can back a pedigree:

- ApiDirectory: live lookups against the farm backend REST API
- InMemoryDirectory: a dict of records, e.g. loaded from the sync cache
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from herdbook.core import client

logger = logging.getLogger(__name__)


class AnimalNotFoundError(LookupError):
    """Raised when a requested animal does not resolve in the directory."""

    def __init__(self, animal_id: int, detail: str = "not found"):
        self.animal_id = animal_id
        super().__init__(f"Animal {animal_id} {detail}")


class Sex(Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> "Sex":
        """Parse a registry sex code.

        The backend stores "M" (macho) and "H" (hembra); English codes are
        accepted too. Anything else is UNKNOWN.
        """
        code = (value or "").strip().upper()
        if code in ("M", "MALE", "MACHO"):
            return cls.MALE
        if code in ("H", "F", "FEMALE", "HEMBRA"):
            return cls.FEMALE
        return cls.UNKNOWN

    @property
    def code(self) -> str | None:
        """Registry code ("M"/"H"), None when unknown."""
        return {Sex.MALE: "M", Sex.FEMALE: "H"}.get(self)


@dataclass(frozen=True)
class AnimalRef:
    """One registry animal as seen by the pedigree code."""

    id: int
    sex: Sex = Sex.UNKNOWN
    father_id: int | None = None
    mother_id: int | None = None
    name: str | None = None
    tag: str | None = None
    breed: str | None = None
    active: bool = True

    def __post_init__(self):
        if self.id <= 0:
            raise ValueError(f"Animal id must be positive, got {self.id}")

    @property
    def label(self) -> str:
        return self.tag or self.name or str(self.id)


class AnimalDirectory(Protocol):
    async def lookup(self, animal_id: int) -> AnimalRef | None: ...


# =============================================================================
# Normalization Helpers
# =============================================================================


def _parent_id(value) -> int | None:
    # The backend leaves unknown parents null; older rows use 0
    if value in (None, "", 0):
        return None
    return int(value)


def animal_from_record(record: dict) -> AnimalRef:
    """
    Convert a backend AnimalDTO (camelCase JSON) into an AnimalRef.

    Converts:
        { id, nombre, numeroIdentificacion, sexo, padreId, madreId, activo, razaNombre }
    To:
        AnimalRef(id, sex, father_id, mother_id, name, tag, active, breed)
    """
    breed = record.get("razaNombre")
    if breed is None and isinstance(record.get("raza"), str):
        breed = record["raza"]

    return AnimalRef(
        id=int(record["id"]),
        sex=Sex.parse(record.get("sexo")),
        father_id=_parent_id(record.get("padreId")),
        mother_id=_parent_id(record.get("madreId")),
        name=record.get("nombre"),
        tag=record.get("numeroIdentificacion"),
        breed=breed,
        active=record.get("activo", True),
    )


# =============================================================================
# Directory Implementations
# =============================================================================


class InMemoryDirectory:
    """Directory over records already held in memory."""

    def __init__(self, animals: list[AnimalRef] | None = None):
        self._animals: dict[int, AnimalRef] = {}
        # Lowercased tag or name -> animal id, filled from a cache's indices
        self._labels: dict[str, int] = {}
        for animal in animals or []:
            self.add(animal)

    def add(self, animal: AnimalRef) -> None:
        self._animals[animal.id] = animal

    def __len__(self) -> int:
        return len(self._animals)

    def __contains__(self, animal_id: int) -> bool:
        return animal_id in self._animals

    async def lookup(self, animal_id: int) -> AnimalRef | None:
        return self._animals.get(animal_id)

    def find(self, identifier: str) -> AnimalRef:
        """
        Find an animal by any identifier (ID, ear tag, or name).

        Args:
            identifier: Registry ID, numeroIdentificacion, or name

        Returns:
            The matching animal

        Raises:
            AnimalNotFoundError: If nothing matches
        """
        key = identifier.strip()
        if key.isdigit() and int(key) in self._animals:
            return self._animals[int(key)]

        animal_id = self._labels.get(key.lower())
        if animal_id is None or animal_id not in self._animals:
            raise AnimalNotFoundError(key)
        return self._animals[animal_id]

    @classmethod
    def from_records(cls, records: list[dict]) -> "InMemoryDirectory":
        return cls([animal_from_record(r) for r in records])

    @classmethod
    def from_cache(cls, path: Path) -> "InMemoryDirectory":
        """Load a directory from a cache file written by `sync_animals`."""
        with open(path) as f:
            data = json.load(f)
        records = data.get("animals", [])
        directory = cls.from_records(records)

        # Indices point at positions in the animals list; names first so tags win
        indices = data.get("indices", {})
        for index in ("by_name", "by_tag"):
            for label, position in indices.get(index, {}).items():
                directory._labels[label] = int(records[position]["id"])

        logger.info("Loaded %d animals from %s", len(directory), path)
        return directory


class ApiDirectory:
    """Directory backed by live GET /Animales/{id} requests."""

    async def lookup(self, animal_id: int) -> AnimalRef | None:
        record = await client.get_animal_record(animal_id)
        if record is None:
            logger.debug("Animal %s has no record in the backend", animal_id)
            return None
        return animal_from_record(record)
