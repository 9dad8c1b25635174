"""Ancestor path enumeration.

Every occurrence of an ancestor in a pedigree tree is one line of descent
from that ancestor to the root. Collecting those lines per ancestor gives
the input to Wright's path-counting method.
"""

from collections import defaultdict
from dataclasses import dataclass

from herdbook.pedigree.tree import PedigreeNode, Side


@dataclass(frozen=True)
class AncestorPath:
    """One route from the root up to an ancestor.

    sides[0] tells which parent of the root the route goes through; ids are
    the animals visited after the root, ending with the ancestor itself.
    """

    sides: tuple[Side, ...]
    ids: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.sides)

    @property
    def ancestor_id(self) -> int:
        return self.ids[-1]

    @property
    def side(self) -> Side:
        return self.sides[0]

    @property
    def generations(self) -> int:
        """Generations between the root's parent on this side and the ancestor."""
        return len(self.sides) - 1

    def intermediates(self) -> frozenset[int]:
        return frozenset(self.ids[:-1])


def enumerate_paths(tree: PedigreeNode) -> dict[int, list[AncestorPath]]:
    """
    Collect every path from the root to each ancestor in the tree.

    Args:
        tree: Root node of a built pedigree

    Returns:
        Mapping of ancestor id to its paths. Ancestors seen once are kept
        with a single path.
    """
    paths: dict[int, list[AncestorPath]] = defaultdict(list)
    stack: list[tuple[PedigreeNode, tuple[Side, ...], tuple[int, ...]]] = [(tree, (), ())]

    while stack:
        node, sides, ids = stack.pop()
        # Cycle leaves and the root reappearing are not lines of descent
        if sides and not node.cycle and node.id != tree.id:
            paths[node.id].append(AncestorPath(sides, ids))

        for side, parent in node.parents():
            stack.append((parent, sides + (side,), ids + (parent.id,)))

    return dict(paths)


def common_ancestors(path_map: dict[int, list[AncestorPath]]) -> list[int]:
    """Ancestor ids reached by two or more paths, in ascending order."""
    return sorted(ancestor_id for ancestor_id, paths in path_map.items() if len(paths) >= 2)
