"""
Search Statistics
=================
Counters collected while filtering domains and searching, reported in
solve results, CLI JSON output and logs.
"""
from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class SearchStats:
    """Work done by one solve call."""
    values_removed_node: int = 0   # Dates dropped by unary filtering
    revisions: int = 0             # Arcs revised by AC-3
    values_removed_arc: int = 0    # Dates dropped by AC-3
    nodes_visited: int = 0         # Tentative assignments pushed
    backtracks: int = 0            # Tentative assignments popped
    max_depth: int = 0             # Longest partial assignment reached

    domain_sizes_after_node: List[int] = field(default_factory=list)
    domain_sizes_after_arc: List[int] = field(default_factory=list)

    @property
    def has_empty_domain(self) -> bool:
        return 0 in self.domain_sizes_after_arc

    def to_dict(self) -> Dict:
        return {
            "values_removed_node": self.values_removed_node,
            "revisions": self.revisions,
            "values_removed_arc": self.values_removed_arc,
            "nodes_visited": self.nodes_visited,
            "backtracks": self.backtracks,
            "max_depth": self.max_depth,
            "domain_sizes_after_node": list(self.domain_sizes_after_node),
            "domain_sizes_after_arc": list(self.domain_sizes_after_arc),
        }
