"""
samples.py — Fixed Sample Inputs
=================================
Hand-built, deterministic inputs for the demo app and the test-suite.
Random generation is somebody else's job; these are the structures the
UI falls back to when the user has not built their own.
"""

from algotrace.graph.graph import Graph
from algotrace.graph.board import Board


def weighted_demo() -> Graph:
    """Six-node undirected weighted graph (classic Dijkstra textbook shape)."""
    g = Graph(directed=False, weighted=True)
    for nid in "ABCDEF":
        g.create_node(nid)
    for u, v, w in [
        ("A", "B", 4), ("A", "C", 2), ("B", "C", 1), ("B", "D", 5),
        ("C", "D", 8), ("C", "E", 10), ("D", "E", 2), ("D", "F", 6),
        ("E", "F", 3),
    ]:
        g.create_edge(u, v, weight=w)
    g.layout_circle()
    return g


def diamond_flow_network() -> Graph:
    """s→a 3, s→b 2, a→t 2, b→t 3, a→b 1.  Max flow = min cut {s} = 5."""
    g = Graph(directed=True, weighted=True)
    for nid in ("s", "a", "b", "t"):
        g.create_node(nid)
    for u, v, c in [("s", "a", 3), ("s", "b", 2), ("a", "t", 2), ("b", "t", 3), ("a", "b", 1)]:
        g.create_edge(u, v, weight=c)
    g.layout_circle()
    return g


def two_triangles() -> Graph:
    """Triangles 0-1-2 and 3-4-5 joined by the single edge 2-3."""
    g = Graph(directed=False, weighted=False)
    for nid in "012345":
        g.create_node(nid)
    for u, v in [("0", "1"), ("1", "2"), ("2", "0"), ("2", "3"), ("3", "4"), ("4", "5"), ("5", "3")]:
        g.create_edge(u, v)
    g.layout_circle()
    return g


def euler_circuit_demo() -> Graph:
    """Bow-tie: two triangles sharing vertex 0; every degree is even."""
    g = Graph(directed=False, weighted=False)
    for nid in "01234":
        g.create_node(nid)
    for u, v in [("0", "1"), ("1", "2"), ("2", "0"), ("0", "3"), ("3", "4"), ("4", "0")]:
        g.create_edge(u, v)
    g.layout_circle()
    return g


def euler_path_demo() -> Graph:
    """'House' shape: square plus one diagonal; vertices 0 and 2 are odd."""
    g = Graph(directed=False, weighted=False)
    for nid in "0123":
        g.create_node(nid)
    for u, v in [("0", "1"), ("1", "2"), ("2", "3"), ("3", "0"), ("0", "2")]:
        g.create_edge(u, v)
    g.layout_circle()
    return g


def postman_demo() -> Graph:
    """Hexagon with two chords → four odd-degree vertices to pair up."""
    g = Graph(directed=False, weighted=True)
    for nid in "ABCDEF":
        g.create_node(nid)
    for u, v, w in [
        ("A", "B", 3), ("B", "C", 4), ("C", "D", 3), ("D", "E", 5),
        ("E", "F", 2), ("F", "A", 4), ("A", "D", 6), ("B", "E", 7),
    ]:
        g.create_edge(u, v, weight=w)
    g.layout_circle()
    return g


def grid_demo() -> Board:
    return Board.from_strings([
        "S...#...",
        ".##.#.#.",
        "...#..#.",
        ".#...##.",
        ".#.#....",
        "...#.#.E",
    ])


def maze_demo() -> Board:
    return Board.from_strings([
        "#########",
        "#S..#...#",
        "#.#.#.#.#",
        "#.#...#.#",
        "#.#####.#",
        "#...#..E#",
        "#########",
    ])


def islands_demo() -> Board:
    return Board.from_strings([
        "11000",
        "11010",
        "00100",
        "00011",
        "10011",
    ])


SAMPLES = {
    "weighted":         weighted_demo,
    "diamond":          diamond_flow_network,
    "two_triangles":    two_triangles,
    "euler_circuit":    euler_circuit_demo,
    "euler_path":       euler_path_demo,
    "postman":          postman_demo,
    "grid":             grid_demo,
    "maze":             maze_demo,
    "islands":          islands_demo,
}
