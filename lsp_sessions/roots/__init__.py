"""
Project root discovery.

Key components:
- search_ancestors: nearest start-or-ancestor accepted by a predicate
- root_pattern: resolver factory over marker files and directories
- find_*_ancestor: single-marker resolvers
- ProjectRootDetector: generic multi-language project detection
"""

from .detector import ProjectRootDetector
from .resolver import (
    RootPredicate,
    RootResolver,
    find_git_ancestor,
    find_node_modules_ancestor,
    find_package_json_ancestor,
    root_pattern,
    search_ancestors,
)

__all__ = [
    "RootPredicate",
    "RootResolver",
    "search_ancestors",
    "root_pattern",
    "find_git_ancestor",
    "find_node_modules_ancestor",
    "find_package_json_ancestor",
    "ProjectRootDetector",
]
