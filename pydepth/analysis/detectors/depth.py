from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional
import ast

from pydepth.parsing.ir import Block, Position, Span
from pydepth.parsing.python_parser import iter_children

@dataclass(frozen=True)
class DepthStat:
    module: str
    function: str
    depth: int
    position: Position

    def __str__(self) -> str:
        return f"{self.depth} {self.module} {self.function} {self.position}"

class MaxDepthVisitor:
    """Preorder walk recording the nesting level reached at every block.

    Only the most recently entered block is remembered. A block that starts
    after it and also ends after it is taken as a sibling (of it or of one
    of its ancestors): the walk steps back out by one level before entering.
    The state is shared by the whole walk and never restored on the way up.
    """

    def __init__(self) -> None:
        self.depth = 0
        self.node_depths: list[int] = []
        self.last_span: Optional[Span] = None

    def visit(self, node: object) -> None:
        if isinstance(node, Block):
            self._enter(node.span)
        for child in iter_children(node):
            self.visit(child)

    def _enter(self, span: Span) -> None:
        if self.last_span is not None and span.follows(self.last_span):
            self.depth -= 1
        self.last_span = span
        self.depth += 1
        self.node_depths.append(self.depth)

    @property
    def max_depth(self) -> int:
        return max(self.node_depths, default=0)

def statement_depth(stmt: ast.stmt) -> int:
    v = MaxDepthVisitor()
    v.visit(stmt)
    return v.max_depth

def max_depth(body: Iterable[ast.stmt]) -> int:
    """Maximum nesting depth of a function body, 0 when it holds no block."""
    return max((statement_depth(stmt) for stmt in body), default=0)
