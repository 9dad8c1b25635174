"""Pedigree tree builder.

Resolves an animal's ancestors through an AnimalDirectory into a tree of
PedigreeNode objects, one node per occurrence: an ancestor reached through
both the sire and the dam appears twice, which is what makes inbreeding
visible to the path enumerator.

Expansion of a branch stops when:
- the node sits at the requested maximum depth (node.truncated is set if
  the animal has recorded parents that were not expanded)
- a recorded parent has no record in the directory (branch omitted)
- the animal already appears between the root and this node. The registry
  is supposed to be acyclic, but data-entry mistakes happen; the repeated
  animal is kept as a childless leaf with node.cycle set so reports still
  render.
"""

import asyncio
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from herdbook.core.config import settings
from herdbook.data.directory import AnimalDirectory, AnimalNotFoundError, AnimalRef

logger = logging.getLogger(__name__)


class Side(Enum):
    FATHER = "FATHER"
    MOTHER = "MOTHER"


@dataclass(frozen=True)
class PedigreeNode:
    animal: AnimalRef
    generation: int = 0
    father: "PedigreeNode | None" = None
    mother: "PedigreeNode | None" = None
    truncated: bool = False
    cycle: bool = False

    @property
    def id(self) -> int:
        return self.animal.id

    def parents(self) -> Iterator[tuple[Side, "PedigreeNode"]]:
        """Yield (side, node) for each expanded parent, sire first."""
        if self.father is not None:
            yield Side.FATHER, self.father
        if self.mother is not None:
            yield Side.MOTHER, self.mother

    def walk(self) -> Iterator["PedigreeNode"]:
        """Iterate over every node of the tree, depth-first, root first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            # Push dam first so the sire line is visited first
            stack.extend(parent for _, parent in reversed(list(node.parents())))

    def size(self) -> int:
        return sum(1 for _ in self.walk())

    def depth(self) -> int:
        """Deepest generation present (0 for a lone root)."""
        return max(node.generation for node in self.walk())


class _LookupCache:
    """Per-build memo of directory lookups.

    In-flight lookups are stored as tasks so two branches asking for the
    same animal at the same time share a single request.
    """

    def __init__(self, directory: AnimalDirectory, max_concurrent: int):
        self._directory = directory
        self._tasks: dict[int, asyncio.Task] = {}
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self.requests = 0

    async def _fetch(self, animal_id: int) -> AnimalRef | None:
        async with self._semaphore:
            self.requests += 1
            return await self._directory.lookup(animal_id)

    async def get(self, animal_id: int) -> AnimalRef | None:
        task = self._tasks.get(animal_id)
        if task is None:
            task = asyncio.ensure_future(self._fetch(animal_id))
            self._tasks[animal_id] = task
        return await task

    def tasks(self) -> list[asyncio.Task]:
        return list(self._tasks.values())


class PedigreeBuilder:
    """Builds one pedigree tree. Create a new builder per build."""

    def __init__(self, directory: AnimalDirectory, max_concurrent_lookups: int | None = None):
        self._cache = _LookupCache(directory, max_concurrent_lookups or settings.max_concurrent_lookups)
        self._branches: list[asyncio.Task] = []
        self.cycles: list[tuple[int, ...]] = []

    @property
    def lookups(self) -> int:
        """Directory requests issued so far."""
        return self._cache.requests

    async def build(self, root_id: int, max_depth: int) -> PedigreeNode:
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")

        try:
            root = await self._cache.get(root_id)
            if root is None:
                raise AnimalNotFoundError(root_id)

            return await self._expand(root, 0, max_depth, ())
        finally:
            await self._cancel_outstanding()

    async def _cancel_outstanding(self) -> None:
        """Stop branches and lookups still running after a failed build."""
        tasks = self._branches + self._cache.tasks()
        for task in tasks:
            if not task.done():
                task.cancel()
        # Retrieve every outcome so failed lookups are not reported as unhandled
        await asyncio.gather(*tasks, return_exceptions=True)

    def _branch(self, coro) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._branches.append(task)
        return task

    async def _expand(
        self,
        animal: AnimalRef,
        generation: int,
        max_depth: int,
        lineage: tuple[int, ...],
    ) -> PedigreeNode:
        if animal.id in lineage:
            loop = lineage[lineage.index(animal.id) :] + (animal.id,)
            self.cycles.append(loop)
            logger.warning(
                "Pedigree cycle: animal %s is recorded as its own ancestor (%s); branch truncated",
                animal.id,
                " -> ".join(str(i) for i in loop),
            )
            return PedigreeNode(animal, generation, cycle=True)

        if generation >= max_depth:
            has_parents = animal.father_id is not None or animal.mother_id is not None
            return PedigreeNode(animal, generation, truncated=has_parents)

        lineage = lineage + (animal.id,)
        father, mother = await asyncio.gather(
            self._branch(self._expand_parent(animal.father_id, generation + 1, max_depth, lineage)),
            self._branch(self._expand_parent(animal.mother_id, generation + 1, max_depth, lineage)),
        )
        return PedigreeNode(animal, generation, father=father, mother=mother)

    async def _expand_parent(
        self,
        parent_id: int | None,
        generation: int,
        max_depth: int,
        lineage: tuple[int, ...],
    ) -> PedigreeNode | None:
        if parent_id is None:
            return None

        parent = await self._cache.get(parent_id)
        if parent is None:
            logger.debug("Parent %s of animal %s not in directory", parent_id, lineage[-1])
            return None

        return await self._expand(parent, generation, max_depth, lineage)


async def build_tree(
    directory: AnimalDirectory,
    root_id: int,
    max_depth: int,
    max_concurrent_lookups: int | None = None,
) -> PedigreeNode:
    """
    Build the ancestor tree of an animal.

    Args:
        directory: Where animal records are looked up
        root_id: The animal whose pedigree is built
        max_depth: Generations above the root to resolve (0 = root only)
        max_concurrent_lookups: Cap on simultaneous directory requests

    Returns:
        Root PedigreeNode

    Raises:
        AnimalNotFoundError: If root_id is not in the directory
        ValueError: If max_depth is negative
    """
    builder = PedigreeBuilder(directory, max_concurrent_lookups)
    return await builder.build(root_id, max_depth)
