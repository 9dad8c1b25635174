"""Inbreeding coefficient by Wright's path-counting method.

    F = sum over common ancestors A, over pairs of paths (p, q) with p through
        the sire and q through the dam, meeting only at A:
            (1/2) ** (n1 + n2 + 1) * (1 + F_A)

n1 and n2 count generations from the sire and the dam up to A. F_A, the
ancestor's own inbreeding, is found by running the same calculation on A's
part of the already-built tree. When some of A's own ancestry lies beyond
the depth that was built, F_A only counts what is there (0 if A sits at the
edge) and the result is flagged depth_limited.

All arithmetic is exact (fractions.Fraction), so the order in which
ancestors and path pairs are visited cannot change the result.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from fractions import Fraction

from herdbook.pedigree.paths import AncestorPath, common_ancestors, enumerate_paths
from herdbook.pedigree.tree import PedigreeNode, Side

ZERO = Fraction(0)


@dataclass(frozen=True)
class AncestorContribution:
    ancestor_id: int
    path_pairs: int
    inbreeding: Fraction
    contribution: Fraction


@dataclass(frozen=True)
class ConsanguinityResult:
    animal_id: int
    exact: Fraction
    depth_limited: bool = False
    common_ancestors: tuple[AncestorContribution, ...] = ()
    computed_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def coefficient(self) -> float:
        return float(self.exact)

    @property
    def percentage(self) -> float:
        return float(self.exact * 100)


def path_pairs(paths: list[AncestorPath]) -> Iterator[tuple[AncestorPath, AncestorPath]]:
    """Yield (sire-side, dam-side) path pairs that meet only at the ancestor."""
    sire_side = [(p, p.intermediates()) for p in paths if p.side is Side.FATHER]
    dam_side = [(q, q.intermediates()) for q in paths if q.side is Side.MOTHER]

    for p, p_via in sire_side:
        for q, q_via in dam_side:
            if p_via.isdisjoint(q_via):
                yield p, q


def ancestor_contributions(
    path_map: dict[int, list[AncestorPath]],
    ancestor_inbreeding: Callable[[int], Fraction] | None = None,
) -> list[AncestorContribution]:
    """
    Per-ancestor terms of Wright's sum.

    Args:
        path_map: Output of enumerate_paths
        ancestor_inbreeding: Returns F_A for an ancestor id; F_A = 0 if omitted

    Returns:
        One entry per common ancestor with at least one qualifying path
        pair, sorted by ancestor id
    """
    contributions = []

    for ancestor_id in common_ancestors(path_map):
        pairs = list(path_pairs(path_map[ancestor_id]))
        if not pairs:
            continue

        f_a = ancestor_inbreeding(ancestor_id) if ancestor_inbreeding else ZERO
        loops = sum((Fraction(1, 2 ** (p.generations + q.generations + 1)) for p, q in pairs), ZERO)
        contributions.append(
            AncestorContribution(
                ancestor_id=ancestor_id,
                path_pairs=len(pairs),
                inbreeding=f_a,
                contribution=loops * (1 + f_a),
            )
        )

    return contributions


def compute_coefficient(
    path_map: dict[int, list[AncestorPath]],
    ancestor_inbreeding: Callable[[int], Fraction] | None = None,
) -> Fraction:
    """Inbreeding coefficient of the root of `path_map`. Empty map gives 0."""
    return sum((c.contribution for c in ancestor_contributions(path_map, ancestor_inbreeding)), ZERO)


class InbreedingCalculator:
    """Computes F for the root of a built tree, resolving F_A recursively."""

    def __init__(self, tree: PedigreeNode):
        self.tree = tree
        self._occurrences = self._shallowest_occurrences(tree)
        self._memo: dict[int, Fraction] = {}
        self._resolving: set[int] = set()
        # Ancestors whose own inbreeding was approximated as 0
        self.approximated: set[int] = set()

    @staticmethod
    def _shallowest_occurrences(tree: PedigreeNode) -> dict[int, PedigreeNode]:
        # The shallowest occurrence has the most generations above it
        nodes: dict[int, PedigreeNode] = {}
        for node in tree.walk():
            if node.cycle:
                continue
            current = nodes.get(node.id)
            if current is None or node.generation < current.generation:
                nodes[node.id] = node
        return nodes

    @property
    def depth_limited(self) -> bool:
        return bool(self.approximated)

    def ancestor_inbreeding(self, ancestor_id: int) -> Fraction:
        """F_A computed from the ancestor's subtree."""
        if ancestor_id in self._memo:
            return self._memo[ancestor_id]
        if ancestor_id in self._resolving:
            # Only reachable with cyclic parentage
            return ZERO

        node = self._occurrences[ancestor_id]
        if any(n.truncated for n in node.walk()):
            self.approximated.add(ancestor_id)
        if node.truncated:
            self._memo[ancestor_id] = ZERO
            return ZERO

        self._resolving.add(ancestor_id)
        try:
            value = compute_coefficient(enumerate_paths(node), self.ancestor_inbreeding)
        finally:
            self._resolving.discard(ancestor_id)

        self._memo[ancestor_id] = value
        return value

    def calculate(self) -> ConsanguinityResult:
        contributions = ancestor_contributions(enumerate_paths(self.tree), self.ancestor_inbreeding)
        total = sum((c.contribution for c in contributions), ZERO)
        return ConsanguinityResult(
            animal_id=self.tree.id,
            exact=total,
            depth_limited=self.depth_limited,
            common_ancestors=tuple(contributions),
        )


def inbreeding(tree: PedigreeNode) -> ConsanguinityResult:
    """Inbreeding coefficient of the tree's root animal."""
    return InbreedingCalculator(tree).calculate()
