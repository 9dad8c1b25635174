"""Genetic traceability reports.

Shapes pedigree trees and inbreeding results into the farm backend's
response contracts:

- tree report: { animal, niveles, fechaGeneracion, ancestros: [node...] }
  where node = { animal, nivel, padre, madre }
- coefficient report: { animalId, nombre, coeficienteConsanguinidad,
  fechaCalculo, limitadoPorProfundidad }

The coefficient is reported as a percentage rounded to 2 decimals.
"""

from datetime import datetime

from herdbook.core.config import settings
from herdbook.data.directory import AnimalNotFoundError, AnimalRef
from herdbook.pedigree.consanguinity import ConsanguinityResult, inbreeding
from herdbook.pedigree.service import Pedigree
from herdbook.pedigree.tree import PedigreeNode


def validate_generations(generations: int | None, default: int | None = None) -> int:
    """Return the generation count to use, or raise ValueError if out of range.

    None falls back to `default`, or to settings.default_generations.
    """
    if generations is None:
        return default or settings.default_generations
    if not settings.min_generations <= generations <= settings.max_generations:
        raise ValueError(
            f"Generations must be between {settings.min_generations} and {settings.max_generations}, "
            f"got {generations}"
        )
    return generations


def animal_summary(animal: AnimalRef) -> dict:
    return {
        "id": animal.id,
        "numeroIdentificacion": animal.tag,
        "nombre": animal.name,
        "sexo": animal.sex.code,
        "razaNombre": animal.breed,
        "padreId": animal.father_id,
        "madreId": animal.mother_id,
    }


def node_to_dict(node: PedigreeNode) -> dict:
    return {
        "animal": animal_summary(node.animal),
        "nivel": node.generation,
        "padre": node_to_dict(node.father) if node.father else None,
        "madre": node_to_dict(node.mother) if node.mother else None,
    }


def tree_report(tree: PedigreeNode, generations: int) -> dict:
    return {
        "animal": animal_summary(tree.animal),
        "niveles": generations,
        "fechaGeneracion": datetime.now().isoformat(),
        "ancestros": [node_to_dict(parent) for _, parent in tree.parents()],
    }


def coefficient_report(animal: AnimalRef, result: ConsanguinityResult) -> dict:
    return {
        "animalId": result.animal_id,
        "nombre": animal.name,
        "coeficienteConsanguinidad": round(result.percentage, 2),
        "fechaCalculo": result.computed_at.isoformat(),
        "limitadoPorProfundidad": result.depth_limited,
    }


async def get_active_tree(pedigree: Pedigree, animal_id: int, generations: int) -> PedigreeNode:
    """Pedigree of an animal that is still in the herd.

    Raises:
        AnimalNotFoundError: If the animal is unknown or inactive
    """
    tree = await pedigree.get_tree(animal_id, generations)
    if not tree.animal.active:
        raise AnimalNotFoundError(animal_id, "not found or inactive")
    return tree


async def build_tree_report(pedigree: Pedigree, animal_id: int, generations: int | None = None) -> dict:
    """
    Ancestor tree report for an active animal.

    Raises:
        ValueError: If generations is out of range
        AnimalNotFoundError: If the animal is unknown or inactive
    """
    generations = validate_generations(generations)
    tree = await get_active_tree(pedigree, animal_id, generations)
    return tree_report(tree, generations)


async def build_coefficient_report(pedigree: Pedigree, animal_id: int, generations: int | None = None) -> dict:
    """
    Inbreeding coefficient report for an active animal.

    Defaults to settings.default_coefficient_generations.

    Raises:
        ValueError: If generations is out of range
        AnimalNotFoundError: If the animal is unknown or inactive
    """
    generations = validate_generations(generations, settings.default_coefficient_generations)
    tree = await get_active_tree(pedigree, animal_id, generations)
    return coefficient_report(tree.animal, inbreeding(tree))


def format_pedigree_tree(node: PedigreeNode, indent: int = 0) -> str:
    """
    Format a pedigree tree as a readable string.

    Args:
        node: Pedigree node (usually the root)
        indent: Current indentation level

    Returns:
        Formatted tree string. Branches stopped by the depth limit end in
        "[...]", repeated animals in a data-entry loop in "[cycle]".
    """
    prefix = "  " * indent
    animal = node.animal

    line = f"{prefix}{animal.label}"
    if animal.name and animal.name != animal.label:
        line += f" {animal.name}"
    if animal.breed:
        line += f" ({animal.breed})"
    if node.cycle:
        line += " [cycle]"
    elif node.truncated:
        line += " [...]"

    lines = [line]

    if node.father:
        lines.append(f"{prefix}  ├─ Sire:")
        lines.append(format_pedigree_tree(node.father, indent + 2))
    if node.mother:
        lines.append(f"{prefix}  └─ Dam:")
        lines.append(format_pedigree_tree(node.mother, indent + 2))

    return "\n".join(lines)


def format_consanguinity(animal: AnimalRef, result: ConsanguinityResult, labels: dict[int, str] | None = None) -> str:
    """Plain-text summary of an inbreeding result with per-ancestor terms."""
    labels = labels or {}
    lines = [f"{animal.label}: F = {result.coefficient:.6f} ({result.percentage:.2f}%)"]

    for c in result.common_ancestors:
        name = labels.get(c.ancestor_id, str(c.ancestor_id))
        lines.append(
            f"  {name:<15} {c.path_pairs} path pair(s)  F_A = {float(c.inbreeding):.4f}  "
            f"contribution = {float(c.contribution):.6f}"
        )

    if result.depth_limited:
        lines.append("  Note: some ancestors' own inbreeding lies beyond the generations searched")
    return "\n".join(lines)
