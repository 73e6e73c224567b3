# Copyright (C) 2022 Leiden University Medical Center
# This file is part of genomecount
#
# genomecount is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# genomecount is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with genomecount.  If not, see <https://www.gnu.org/licenses/

from typing import List, Optional

from ._dna import Sequence

NOT_FOUND = -1
ALPHABET_SIZE = 4


class TrieNode:
    count: int
    children: List[Optional["TrieNode"]]

    __slots__ = ["count", "children"]

    def __init__(self):
        self.count = NOT_FOUND
        self.children = [None] * ALPHABET_SIZE

    def __getitem__(self, symbol: int) -> Optional["TrieNode"]:
        return self.children[symbol]

    def __repr__(self):
        keys = tuple(i for i, child in enumerate(self.children) if child)
        return f"TrieNode count: {self.count}, keys: {keys}"

    def is_leaf(self) -> bool:
        return not any(self.children)

    def increment(self):
        # A node without a count starts at 0 before it is incremented.
        if self.count == NOT_FOUND:
            self.count = 0
        self.count += 1


class Trie:
    """
    Radix-4 prefix tree that counts how often each exact Sequence was
    inserted.

    Nodes are only created by insert and are never pruned. Removing a
    sequence resets the count of its terminal node; the path stays.
    """
    def __init__(self):
        self.root = TrieNode()
        self._number_of_sequences = 0

    @property
    def number_of_sequences(self) -> int:
        """Total number of insertions since the trie was created."""
        return self._number_of_sequences

    def _walk(self, sequence: Sequence) -> Optional[TrieNode]:
        node: Optional[TrieNode] = self.root
        for symbol in sequence:
            node = node[symbol]  # type: ignore
            if node is None:
                return None
        return node

    def insert(self, sequence: Sequence):
        node = self.root
        for symbol in sequence:
            next_node = node.children[symbol]
            if next_node is None:
                next_node = TrieNode()
                node.children[symbol] = next_node
            node = next_node
        node.increment()
        self._number_of_sequences += 1

    def find(self, sequence: Sequence) -> int:
        """
        Return the count for sequence, or NOT_FOUND. NOT_FOUND is also
        returned when the path only exists as a prefix of longer sequences.
        """
        node = self._walk(sequence)
        if node is None:
            return NOT_FOUND
        return node.count

    def lookup(self, sequence: Sequence) -> Optional[int]:
        """Like find, but None instead of the NOT_FOUND sentinel."""
        count = self.find(sequence)
        if count == NOT_FOUND:
            return None
        return count

    def remove(self, sequence: Sequence):
        node = self._walk(sequence)
        if node is not None:
            node.count = NOT_FOUND

    def raw_stats(self) -> List[List[int]]:
        """
        Per depth, the number of nodes having 0, 1, 2, 3 and 4 children.
        """
        stats: List[List[int]] = []
        layer = [self.root]
        while layer:
            layer_stats = [0] * (ALPHABET_SIZE + 1)
            next_layer = []
            for node in layer:
                children = [child for child in node.children if child]
                layer_stats[len(children)] += 1
                next_layer.extend(children)
            stats.append(layer_stats)
            layer = next_layer
        return stats
