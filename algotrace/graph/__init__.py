"""
graph/
-----
Input data layer.  Public API:

    from algotrace.graph import Graph, Node, Edge, Board
    from algotrace.graph import NodeState, EdgeState, CellType
"""

from algotrace.graph.node  import Node,  NodeState
from algotrace.graph.edge  import Edge,  EdgeState
from algotrace.graph.graph import Graph
from algotrace.graph.board import Board, CellType, Position

__all__ = [
    "Node",      "NodeState",
    "Edge",      "EdgeState",
    "Graph",
    "Board",     "CellType",   "Position",
]
