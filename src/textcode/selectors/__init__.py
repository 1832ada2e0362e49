"""Selection helpers: bracket pairs and text search."""

from .brackets import BRACKET_PAIRS, find_anchor, find_match, select_bracket_span
from .search import find_next, find_previous

__all__ = [
    "BRACKET_PAIRS",
    "find_anchor",
    "find_match",
    "select_bracket_span",
    "find_next",
    "find_previous",
]
