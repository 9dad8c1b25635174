"""Reports module - genetic traceability report payloads."""

from herdbook.reports.lineage import (
    build_coefficient_report,
    build_tree_report,
    format_consanguinity,
    format_pedigree_tree,
    get_active_tree,
    validate_generations,
)

__all__ = [
    "build_tree_report",
    "build_coefficient_report",
    "format_pedigree_tree",
    "format_consanguinity",
    "get_active_tree",
    "validate_generations",
]
