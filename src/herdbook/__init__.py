"""Herdbook pedigree tools.

This package builds multi-generation ancestor trees for animals in the
farm registry and computes their inbreeding (consanguinity) coefficients
with Wright's path-counting method.

Subpackages:
- herdbook.core: Configuration and farm backend API client
- herdbook.data: Animal directory and registry cache
- herdbook.pedigree: Tree builder, path enumeration, inbreeding
- herdbook.reports: Genetic traceability report payloads
"""

# Re-export common items for convenience
from herdbook.core import settings
from herdbook.data import AnimalNotFoundError, AnimalRef, ApiDirectory, InMemoryDirectory, Sex
from herdbook.pedigree import ConsanguinityResult, Pedigree, PedigreeNode

__all__ = [
    "settings",
    "AnimalNotFoundError",
    "AnimalRef",
    "ApiDirectory",
    "InMemoryDirectory",
    "Sex",
    "ConsanguinityResult",
    "Pedigree",
    "PedigreeNode",
]

__version__ = "0.1.0"
