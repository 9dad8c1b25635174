"""Pedigree queries exposed to reports, the CLI and API callers."""

from herdbook.data.directory import AnimalDirectory
from herdbook.pedigree.consanguinity import ConsanguinityResult, inbreeding
from herdbook.pedigree.tree import PedigreeBuilder, PedigreeNode


class Pedigree:
    """Ancestor trees and inbreeding coefficients over one animal directory.

    Each call builds a fresh tree from the directory's current state, so
    concurrent calls for different animals never share anything.
    """

    def __init__(self, directory: AnimalDirectory, max_concurrent_lookups: int | None = None):
        self.directory = directory
        self.max_concurrent_lookups = max_concurrent_lookups

    async def get_tree(self, root_id: int, max_depth: int) -> PedigreeNode:
        """Ancestor tree of `root_id`, `max_depth` generations deep.

        Raises:
            AnimalNotFoundError: If the animal is not in the directory
        """
        builder = PedigreeBuilder(self.directory, self.max_concurrent_lookups)
        return await builder.build(root_id, max_depth)

    async def get_consanguinity(self, root_id: int, max_depth: int) -> ConsanguinityResult:
        """Inbreeding coefficient of `root_id` from a `max_depth` pedigree.

        Raises:
            AnimalNotFoundError: If the animal is not in the directory
        """
        tree = await self.get_tree(root_id, max_depth)
        return inbreeding(tree)
