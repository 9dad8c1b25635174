"""Tests for the Pedigree service."""

import httpx
import pytest

from herdbook.data.directory import AnimalNotFoundError, ApiDirectory
from herdbook.pedigree import Pedigree


def record(animal_id: int, sexo: str, padre: int | None = None, madre: int | None = None) -> dict:
    """Create a mock AnimalDTO in backend API format."""
    return {
        "id": animal_id,
        "numeroIdentificacion": f"T-{animal_id:03d}",
        "nombre": f"Animal {animal_id}",
        "sexo": sexo,
        "padreId": padre,
        "madreId": madre,
        "activo": True,
    }


class TestPedigree:
    """Tests for get_tree and get_consanguinity."""

    async def test_get_tree(self, full_sib_directory):
        """Verify the tree is built to the requested depth."""
        tree = await Pedigree(full_sib_directory).get_tree(1, 1)

        assert tree.depth() == 1
        assert [node.id for _, node in tree.parents()] == [2, 3]

    async def test_get_consanguinity(self, full_sib_directory):
        """Verify the full-sib coefficient is returned."""
        result = await Pedigree(full_sib_directory).get_consanguinity(1, 3)

        assert result.animal_id == 1
        assert result.coefficient == pytest.approx(0.25)

    async def test_not_found(self, full_sib_directory):
        """Verify unknown animals raise AnimalNotFoundError."""
        with pytest.raises(AnimalNotFoundError):
            await Pedigree(full_sib_directory).get_consanguinity(99, 3)

    async def test_over_api(self, mock_herdbook):
        """Verify a full-sib pedigree served by the backend API."""
        records = {
            1: record(1, "H", 2, 3),
            2: record(2, "M", 4, 5),
            3: record(3, "H", 4, 5),
            4: record(4, "M"),
            5: record(5, "H"),
        }
        for animal_id, body in records.items():
            mock_herdbook.get(f"/api/Animales/{animal_id}").mock(return_value=httpx.Response(200, json=body))

        result = await Pedigree(ApiDirectory()).get_consanguinity(1, 4)

        assert result.coefficient == pytest.approx(0.25)
        # One request per distinct animal even though 4 and 5 appear twice
        assert len(mock_herdbook.calls) == 5

    async def test_dangling_parent_over_api(self, mock_herdbook):
        """Verify a parent id the backend does not know is skipped."""
        mock_herdbook.get("/api/Animales/1").mock(return_value=httpx.Response(200, json=record(1, "H", 2, 3)))
        mock_herdbook.get("/api/Animales/2").mock(return_value=httpx.Response(404))
        mock_herdbook.get("/api/Animales/3").mock(return_value=httpx.Response(200, json=record(3, "H")))

        tree = await Pedigree(ApiDirectory()).get_tree(1, 3)

        assert tree.father is None
        assert tree.mother.id == 3
