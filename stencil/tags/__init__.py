"""
Встроенные теги шаблонизатора.
"""

from __future__ import annotations

from .filter_tag import FilterNode
from .for_tag import ForNode, LoopTerminationNode
from .if_tag import IfBranch, IfNode
from .include import IncludeNode
from .inheritance import BlockContext, BlockNode, ExtendsNode

__all__ = [
    "IfNode",
    "IfBranch",
    "ForNode",
    "LoopTerminationNode",
    "FilterNode",
    "IncludeNode",
    "ExtendsNode",
    "BlockNode",
    "BlockContext",
]
