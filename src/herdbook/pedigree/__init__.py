"""Pedigree module - ancestor trees and inbreeding coefficients."""

from herdbook.pedigree.consanguinity import (
    AncestorContribution,
    ConsanguinityResult,
    InbreedingCalculator,
    ancestor_contributions,
    compute_coefficient,
    inbreeding,
    path_pairs,
)
from herdbook.pedigree.paths import AncestorPath, common_ancestors, enumerate_paths
from herdbook.pedigree.service import Pedigree
from herdbook.pedigree.tree import PedigreeBuilder, PedigreeNode, Side, build_tree

__all__ = [
    "Pedigree",
    "PedigreeBuilder",
    "PedigreeNode",
    "Side",
    "build_tree",
    "AncestorPath",
    "enumerate_paths",
    "common_ancestors",
    "AncestorContribution",
    "ConsanguinityResult",
    "InbreedingCalculator",
    "ancestor_contributions",
    "compute_coefficient",
    "inbreeding",
    "path_pairs",
]
