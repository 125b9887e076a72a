"""Document tree model and builder.

Key Components:
    DocumentTree: Node with an optional scalar and named multi-valued fields
    TreeBuilder: Converts markup element streams into document trees
"""

from .builder import TreeBuilder, is_pure_text, normalize_name
from .nodes import DocumentTree, ensure_single

__all__ = [
    "DocumentTree",
    "TreeBuilder",
    "ensure_single",
    "is_pure_text",
    "normalize_name",
]
