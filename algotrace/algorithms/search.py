"""
search.py — Linear & Binary Search
===================================
Two array generators sharing the ArraySnapshot payload.

Linear search:
  init  →  one "compare" per scanned index (short-circuits on a hit;
           the matching compare carries found_index)  →  found / not_found

Binary search (input must be sorted ascending; the registry checks it):
  init  →  one "compare" per probed mid = (left + right) // 2,
           carrying the [left, right] bracket  →  found / not_found
"""

from typing import Generator, List, Sequence

from algotrace.algorithms.step import Step, ArrayStepBuilder


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
LINEAR_PSEUDOCODE: List[str] = [
    "def LinearSearch(arr, target):",         # 0
    "    for i in 0 … len(arr)-1:",           # 1
    "        if arr[i] == target:",           # 2
    "            return i",                   # 3
    "    return NOT FOUND",                   # 4
]

BINARY_PSEUDOCODE: List[str] = [
    "def BinarySearch(arr, target):",         # 0
    "    left, right ← 0, len(arr)-1",        # 1
    "    while left <= right:",               # 2
    "        mid ← (left + right) // 2",      # 3
    "        if arr[mid] == target: return mid",   # 4
    "        if arr[mid] < target:",          # 5
    "            left ← mid + 1",             # 6
    "        else:",                          # 7
    "            right ← mid - 1",            # 8
    "    return NOT FOUND",                   # 9
]


# ---------------------------------------------------------------------------
# Linear search
# ---------------------------------------------------------------------------
def linear_search(values: Sequence, target) -> Generator[Step, None, None]:
    sb = ArrayStepBuilder(values)
    sb.extras["target"] = target

    yield sb.emit(
        "init",
        f"Scan the array left to right looking for {target}.",
        line=1,
    )

    for i, v in enumerate(sb.values):
        sb.highlighted = [i]
        if v == target:
            sb.found_index = i
            yield sb.emit("compare", f"arr[{i}] = {v} equals {target}: found!", line=3)
            sb.highlighted = []
            yield sb.emit(
                "found",
                f"Target {target} found at index {i} after {i + 1} comparison(s).",
                is_final=True,
            )
            return
        yield sb.emit("compare", f"arr[{i}] = {v} is not {target}, move on.", line=2)
        sb.settled.append(i)

    sb.highlighted = []
    yield sb.emit(
        "not_found",
        f"Reached the end of the array: {target} is not present.",
        line=4,
        is_final=True,
    )


# ---------------------------------------------------------------------------
# Binary search
# ---------------------------------------------------------------------------
def binary_search(values: Sequence, target) -> Generator[Step, None, None]:
    sb = ArrayStepBuilder(values)
    sb.extras["target"] = target
    left, right = 0, len(sb.values) - 1
    sb.left, sb.right = left, right
    sb.extras["probes"] = []

    yield sb.emit(
        "init",
        f"Search the sorted array for {target}; bracket is [{left}, {right}].",
        line=1,
    )

    while left <= right:
        mid = (left + right) // 2
        sb.left, sb.right, sb.mid = left, right, mid
        sb.highlighted = [mid]
        sb.extras["probes"] = sb.extras["probes"] + [mid]
        v = sb.values[mid]

        if v == target:
            sb.found_index = mid
            yield sb.emit("compare", f"arr[{mid}] = {v} equals {target}: found!", line=4)
            sb.highlighted = []
            yield sb.emit(
                "found",
                f"Target {target} found at index {mid} after {len(sb.extras['probes'])} probe(s).",
                is_final=True,
            )
            return

        if v < target:
            yield sb.emit(
                "compare",
                f"arr[{mid}] = {v} < {target}: discard the left half, left ← {mid + 1}.",
                line=6,
            )
            sb.settled.extend(range(left, mid + 1))
            left = mid + 1
        else:
            yield sb.emit(
                "compare",
                f"arr[{mid}] = {v} > {target}: discard the right half, right ← {mid - 1}.",
                line=8,
            )
            sb.settled.extend(range(mid, right + 1))
            right = mid - 1

    sb.highlighted = []
    sb.left, sb.right, sb.mid = left, right, None
    yield sb.emit(
        "not_found",
        f"Bracket is empty (left={left} > right={right}): {target} is not present.",
        line=9,
        is_final=True,
    )


def is_sorted(values: Sequence) -> bool:
    return all(values[i] <= values[i + 1] for i in range(len(values) - 1))
