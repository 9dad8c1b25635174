"""Shared test fixtures."""

import sys
from pathlib import Path

import pytest
import respx

# Add src/ to path so tests can import herdbook
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from herdbook.core.config import settings  # noqa: E402
from herdbook.data.directory import AnimalRef, InMemoryDirectory, Sex  # noqa: E402


def male(animal_id: int, father: int | None = None, mother: int | None = None, **kwargs) -> AnimalRef:
    return AnimalRef(animal_id, Sex.MALE, father, mother, **kwargs)


def female(animal_id: int, father: int | None = None, mother: int | None = None, **kwargs) -> AnimalRef:
    return AnimalRef(animal_id, Sex.FEMALE, father, mother, **kwargs)


API_URL = "https://farm.test/api"


@pytest.fixture
def mock_herdbook(monkeypatch):
    """Mock farm backend API responses (routes are under /api)."""
    monkeypatch.setattr(settings, "herdbook_api_url", API_URL)
    monkeypatch.setattr(settings, "herdbook_api_token", None)
    with respx.mock(base_url="https://farm.test") as mock:
        yield mock


@pytest.fixture
def sample_animal_record():
    """Sample AnimalDTO as returned by GET /Animales/{id}."""
    return {
        "id": 1,
        "numeroIdentificacion": "A-001",
        "nombre": "Lucera",
        "fechaNacimiento": "2021-03-14T00:00:00",
        "sexo": "H",
        "estado": "Activo",
        "razaId": 2,
        "razaNombre": "Holstein",
        "padreId": 2,
        "madreId": 3,
        "activo": True,
    }


@pytest.fixture
def founder_directory():
    """A single animal with no recorded parents."""
    return InMemoryDirectory([female(1, name="Founder")])


@pytest.fixture
def full_sib_directory():
    """Sire and dam of animal 1 are full siblings (both out of 4 x 5)."""
    return InMemoryDirectory(
        [
            female(1, 2, 3),
            male(2, 4, 5),
            female(3, 4, 5),
            male(4),
            female(5),
        ]
    )


@pytest.fixture
def parent_offspring_directory():
    """Dam of animal 1 is also its paternal granddam."""
    return InMemoryDirectory(
        [
            male(1, 2, 3),
            male(2, 4, 3),
            female(3),
            male(4),
        ]
    )


@pytest.fixture
def unrelated_directory():
    """Four generations, every ancestor distinct."""
    animals = [female(1, 2, 3)]
    # Generations 1-3: animal n has sire 2n and dam 2n+1
    for n in range(2, 16):
        sex = male if n % 2 == 0 else female
        animals.append(sex(n, 2 * n, 2 * n + 1))
    for n in range(16, 32):
        sex = male if n % 2 == 0 else female
        animals.append(sex(n))
    return InMemoryDirectory(animals)


@pytest.fixture
def two_common_ancestors_directory():
    """
    Four-generation pedigree with two common ancestors.

        1: sire 2, dam 3
        2: sire 4, dam 5          3: sire 6, dam 7
        4: sire 8, dam 9          6: sire 8, dam 12     (8 shared)
        5: sire 10, dam 11        7: sire 13, dam 11    (11 shared)
        8: sire 14, dam 15        11: sire 16, dam 17

    8 and 11 each close one loop with n1 = n2 = 2:
    F = 2 * (1/2) ** 5 = 0.0625. Their own parents (14-17) sit behind the
    shared ancestor on both sides and add nothing.
    """
    return InMemoryDirectory(
        [
            female(1, 2, 3),
            male(2, 4, 5),
            female(3, 6, 7),
            male(4, 8, 9),
            female(5, 10, 11),
            male(6, 8, 12),
            female(7, 13, 11),
            male(8, 14, 15),
            female(9),
            male(10),
            female(11, 16, 17),
            female(12),
            male(13),
            male(14),
            female(15),
            male(16),
            female(17),
        ]
    )


@pytest.fixture
def inbred_ancestor_directory():
    """
    Common ancestor 4 is itself the product of a full-sib mating.

        1: sire 2, dam 3          (2 and 3 are paternal half-sibs by 4)
        2: sire 4, dam 5          3: sire 4, dam 6
        4: sire 7, dam 8          (7 and 8 are full sibs out of 9 x 10)
        7: sire 9, dam 10         8: sire 9, dam 10

    F_4 = 0.25, F_1 = (1/2) ** 3 * (1 + 0.25) = 0.15625
    """
    return InMemoryDirectory(
        [
            female(1, 2, 3),
            male(2, 4, 5),
            female(3, 4, 6),
            male(4, 7, 8),
            female(5),
            female(6),
            male(7, 9, 10),
            female(8, 9, 10),
            male(9),
            female(10),
        ]
    )


@pytest.fixture
def cycle_directory():
    """Data-entry loop: animal 1's sire 2 is recorded with 1 as its own sire.

    Apart from the loop, 2 and 3 are maternal half-sibs out of 4:
    F = (1/2) ** 3 = 0.125
    """
    return InMemoryDirectory(
        [
            female(1, 2, 3),
            male(2, 1, 4),
            female(3, 6, 4),
            female(4),
            male(6),
        ]
    )
