"""
bubble_sort.py — Bubble Sort
=============================
Yields a Step at:
  1. Initial array
  2. Every adjacent comparison                  → "compare"
  3. Every swap                                 → "swap"
  4. End of each pass (rightmost index settles) → "sorted"
  5. Early exit when a pass makes no swap: the remaining prefix is
     marked settled in one extra "sorted" step
  6. Final sorted array                         → "done"

Stable: only strictly-greater neighbours are swapped.
"""

from typing import Generator, List, Sequence

from algotrace.algorithms.step import Step, ArrayStepBuilder


PSEUDOCODE: List[str] = [
    "def BubbleSort(arr):",                            # 0
    "    for i in 0 … n-2:",                           # 1
    "        swapped ← false",                         # 2
    "        for j in 0 … n-i-2:",                     # 3
    "            if arr[j] > arr[j+1]:",               # 4
    "                swap(arr[j], arr[j+1])",          # 5
    "                swapped ← true",                  # 6
    "        arr[n-i-1] is in place",                  # 7
    "        if not swapped: break",                   # 8
    "    return arr",                                  # 9
]


def bubble_sort(values: Sequence) -> Generator[Step, None, None]:
    sb = ArrayStepBuilder(values)
    arr = sb.values
    n = len(arr)
    sb.extras["swaps"] = 0
    sb.extras["comparisons"] = 0

    yield sb.emit("init", f"Sort {n} value(s) by repeatedly swapping out-of-order neighbours.", line=0)

    for i in range(n - 1):
        swapped = False
        for j in range(n - i - 1):
            sb.highlighted = [j, j + 1]
            sb.extras["comparisons"] += 1
            yield sb.emit("compare", f"Compare arr[{j}] = {arr[j]} with arr[{j + 1}] = {arr[j + 1]}.", line=4)

            if arr[j] > arr[j + 1]:
                arr[j], arr[j + 1] = arr[j + 1], arr[j]
                swapped = True
                sb.extras["swaps"] += 1
                yield sb.emit("swap", f"{arr[j + 1]} > {arr[j]}: swap them.", line=5)

        sb.highlighted = []
        settled = n - i - 1
        sb.settled.append(settled)
        yield sb.emit("sorted", f"Pass {i + 1} done: arr[{settled}] = {arr[settled]} is in its final place.", line=7)

        if not swapped:
            rest = [k for k in range(settled) if k not in sb.settled]
            sb.settled.extend(rest)
            yield sb.emit("sorted", "No swaps in this pass: the remaining prefix is already sorted.", line=8)
            break

    # a single element (or the leftmost survivor) is trivially in place
    for k in range(n):
        if k not in sb.settled:
            sb.settled.append(k)
    sb.highlighted = []
    yield sb.emit(
        "done",
        f"Array sorted with {sb.extras['comparisons']} comparison(s) and {sb.extras['swaps']} swap(s).",
        line=9,
        is_final=True,
    )
