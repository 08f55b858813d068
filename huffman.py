import heapq
import math
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Tuple, Union

from errors import EmptyInputError


# Tree nodes

@dataclass(frozen=True)
class Leaf: # terminal node, one per distinct symbol
    symbol: Hashable
    weight: int


@dataclass(frozen=True)
class InternalNode: # weight is always left.weight + right.weight
    weight: int
    left: "TreeNode"
    right: "TreeNode"


TreeNode = Union[Leaf, InternalNode]


# Frequency analysis

def count_frequencies(data: Iterable) -> List[Tuple[Hashable, int]]:
    """
    Count every symbol in data and return (symbol, count) pairs, most frequent first

    Symbols with the same count stay in the order they first appear in data.
    That order decides which of two tied nodes ends up on the left, so it is
    visible in the final code table (code lengths do not depend on it).
    """
    counts: Dict[Hashable, int] = {}
    for symbol in data:
        counts[symbol] = counts.get(symbol, 0) + 1
    # sorted() is stable with reverse=True, ties keep insertion order
    return sorted(counts.items(), key=lambda pair: pair[1], reverse=True)


# Node orderings

class WeightedNodeList:
    """
    Nodes kept in non-increasing weight order, smallest at the tail

    insert() scans for the first strictly lighter entry, so a new node lands
    behind every existing node of the same weight and is popped before them.
    """

    def __init__(self, nodes: Iterable[TreeNode] = ()):
        self._data: List[TreeNode] = []
        for node in nodes:
            self.insert(node)

    @classmethod
    def from_frequencies(cls, frequencies: Iterable[Tuple[Hashable, int]]) -> "WeightedNodeList":
        return cls(Leaf(symbol, weight) for symbol, weight in frequencies)

    def __len__(self):
        return len(self._data)

    def __iter__(self):
        return iter(self._data)

    def __getitem__(self, index):
        return self._data[index]

    def remove_two_smallest(self) -> Tuple[TreeNode, TreeNode]:
        # returns (second smallest, smallest)
        if len(self._data) < 2:
            raise ValueError("need at least two nodes to remove")
        smallest = self._data.pop()
        second = self._data.pop()
        return second, smallest

    def insert(self, node: TreeNode) -> None:
        for i, entry in enumerate(self._data):
            if entry.weight < node.weight:
                self._data.insert(i, node)
                return
        self._data.append(node) # nothing lighter, goes to the tail


class HeapNodeQueue:
    """
    heapq-backed drop-in for WeightedNodeList with the same pop order

    Entries are keyed (weight, -sequence). Initial nodes are numbered in the
    order given and every inserted node gets the next number, so among equal
    weights the newest node comes out first, exactly like the list's tail.
    """

    def __init__(self, nodes: Iterable[TreeNode] = ()):
        self._heap: List[Tuple[int, int, TreeNode]] = []
        self._counter = 0
        for node in nodes:
            self._push(node)

    @classmethod
    def from_frequencies(cls, frequencies: Iterable[Tuple[Hashable, int]]) -> "HeapNodeQueue":
        return cls(Leaf(symbol, weight) for symbol, weight in frequencies)

    def __len__(self):
        return len(self._heap)

    def __iter__(self):
        # heaviest first, same order WeightedNodeList would hold them in
        return iter([entry[2] for entry in sorted(self._heap, reverse=True)])

    def __getitem__(self, index):
        return list(self)[index]

    def _push(self, node: TreeNode) -> None:
        heapq.heappush(self._heap, (node.weight, -self._counter, node))
        self._counter += 1

    def remove_two_smallest(self) -> Tuple[TreeNode, TreeNode]:
        if len(self._heap) < 2:
            raise ValueError("need at least two nodes to remove")
        smallest = heapq.heappop(self._heap)[2]
        second = heapq.heappop(self._heap)[2]
        return second, smallest

    def insert(self, node: TreeNode) -> None:
        self._push(node)


STRATEGIES = {
    "list": WeightedNodeList,
    "heap": HeapNodeQueue,
}


# Tree construction

def build_huffman_tree(frequencies: Iterable[Tuple[Hashable, int]], strategy: str = "list") -> TreeNode:
    """
    Merge the two lightest nodes until a single root is left

    frequencies: (symbol, count) pairs in the order count_frequencies() returns them
    strategy: "list" (linear-scan insertion) or "heap"; both build the same tree
    """
    queue_cls = STRATEGIES.get(strategy)
    if queue_cls is None:
        raise ValueError(f"unknown strategy {strategy!r}, expected one of {sorted(STRATEGIES)}")

    nodes = queue_cls.from_frequencies(frequencies)
    if len(nodes) == 0:
        raise EmptyInputError()
    if len(nodes) == 1: # one distinct symbol, the leaf is the whole tree
        return nodes[0]

    while len(nodes) > 2:
        second, smallest = nodes.remove_two_smallest()
        nodes.insert(InternalNode(second.weight + smallest.weight, second, smallest))

    # last two: heavier (or older) on the left
    left, right = nodes.remove_two_smallest()
    return InternalNode(left.weight + right.weight, left, right)


# Code table derivation

def generate_huffman_codes(root: TreeNode) -> Dict[Hashable, str]:
    codes: Dict[Hashable, str] = {}

    if isinstance(root, Leaf): # single-symbol tree, an empty code is not decodable
        codes[root.symbol] = "0"
        return codes

    def walk(node: TreeNode, prefix: str) -> None:
        if isinstance(node, Leaf):
            codes[node.symbol] = prefix
        elif isinstance(node, InternalNode):
            walk(node.left, prefix + "0")
            walk(node.right, prefix + "1")
        else:
            raise TypeError(f"not a tree node: {node!r}")

    walk(root, "")
    return codes


def build_code_table(data: Iterable, strategy: str = "list", require_symbols: bool = False) -> Dict[Hashable, str]:
    """
    Build the Huffman code table for data

    Empty data gives an empty table, or EmptyInputError when require_symbols is set.
    """
    frequencies = count_frequencies(data)
    if not frequencies:
        if require_symbols:
            raise EmptyInputError("input contains no symbols")
        return {}
    root = build_huffman_tree(frequencies, strategy=strategy)
    return generate_huffman_codes(root)


# Table inspection

def code_lengths(table: Dict[Hashable, str]) -> Dict[Hashable, int]:
    return {symbol: len(code) for symbol, code in table.items()}


def is_prefix_free(table: Dict[Hashable, str]) -> bool:
    # after sorting, a prefix always sits right before some code it prefixes
    codes = sorted(table.values())
    for shorter, longer in zip(codes, codes[1:]):
        if longer.startswith(shorter):
            return False
    return True


def average_code_length(table: Dict[Hashable, str], frequencies: Iterable[Tuple[Hashable, int]]) -> float:
    # bits per symbol, weighted by frequency
    total = 0
    bits = 0
    for symbol, count in frequencies:
        total += count
        bits += count * len(table[symbol])
    return bits / total if total else 0.0


def shannon_entropy(frequencies: Iterable[Tuple[Hashable, int]]) -> float:
    counts = [count for _, count in frequencies if count > 0]
    total = sum(counts)
    if total == 0:
        return 0.0
    return -sum((c / total) * math.log2(c / total) for c in counts)
