"""Tree, heap and trie structures backing the Hi-Lo guess analytics."""

from typing import Any, Dict, Iterator, List, Optional, Tuple

from .exceptions import EmptyStructureError


class FrequencyTreeNode:
    """A single guess value in the frequency tree."""

    __slots__ = ("value", "frequency", "metadata", "left", "right")

    def __init__(self, value: int, metadata: Optional[Dict[str, Any]] = None) -> None:
        self.value: int = value
        self.frequency: int = 1
        self.metadata: Dict[str, Any] = dict(metadata or {})
        self.left: Optional["FrequencyTreeNode"] = None
        self.right: Optional["FrequencyTreeNode"] = None


class FrequencyTree:
    """
    Unbalanced binary search tree keyed by guess value.

    Repeated values bump the node's frequency and merge metadata fields
    (last write wins). The tree is never rebalanced, so monotonic insertion
    degrades it into a linked list; traversals are iterative for that reason.
    """

    def __init__(self) -> None:
        self.root: Optional[FrequencyTreeNode] = None
        self._size: int = 0
        self.total_insertions: int = 0

    def __len__(self) -> int:
        return self._size

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.find(value) is not None

    def insert(self, value: int, metadata: Optional[Dict[str, Any]] = None) -> None:
        """
        Insert a guess value, or bump its frequency if already present.

        Args:
            value: Guess value (BST key).
            metadata: Optional fields merged into the node's metadata.
        """
        self.total_insertions += 1

        if self.root is None:
            self.root = FrequencyTreeNode(value, metadata)
            self._size += 1
            return

        node = self.root
        while True:
            if value == node.value:
                node.frequency += 1
                if metadata:
                    node.metadata.update(metadata)
                return

            if value < node.value:
                if node.left is None:
                    node.left = FrequencyTreeNode(value, metadata)
                    self._size += 1
                    return
                node = node.left
            else:
                if node.right is None:
                    node.right = FrequencyTreeNode(value, metadata)
                    self._size += 1
                    return
                node = node.right

    def find(self, value: int) -> Optional[FrequencyTreeNode]:
        """Return the node holding value, or None."""
        node = self.root
        while node is not None:
            if value == node.value:
                return node
            node = node.left if value < node.value else node.right
        return None

    def _iter_inorder(self) -> Iterator[FrequencyTreeNode]:
        stack: List[FrequencyTreeNode] = []
        node = self.root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node
            node = node.right

    def inorder_traversal(self) -> List[Dict[str, Any]]:
        """
        Return every stored value in ascending order.

        Returns:
            List of {"value", "frequency", "metadata"} dicts; metadata is a copy.
        """
        return [
            {
                "value": node.value,
                "frequency": node.frequency,
                "metadata": dict(node.metadata),
            }
            for node in self._iter_inorder()
        ]

    def most_frequent(self) -> Dict[str, Any]:
        """
        Return the entry with the highest frequency.

        Ties go to the smallest value (first seen in ascending order).

        Raises:
            EmptyStructureError: If nothing has been inserted yet.
        """
        best: Optional[FrequencyTreeNode] = None
        for node in self._iter_inorder():
            if best is None or node.frequency > best.frequency:
                best = node

        if best is None:
            raise EmptyStructureError("Frequency tree is empty.")

        return {
            "value": best.value,
            "frequency": best.frequency,
            "metadata": dict(best.metadata),
        }

    def height(self) -> int:
        """Number of nodes on the longest root-to-leaf path (0 when empty)."""
        if self.root is None:
            return 0

        best = 0
        stack: List[Tuple[FrequencyTreeNode, int]] = [(self.root, 1)]
        while stack:
            node, depth = stack.pop()
            best = max(best, depth)
            if node.left is not None:
                stack.append((node.left, depth + 1))
            if node.right is not None:
                stack.append((node.right, depth + 1))
        return best


class DualHeap:
    """
    Paired insert-only binary heaps over attempt counts.

    The min side answers "best performance", the max side "worst performance".
    Values are only ever accumulated, so only sift-up is needed.
    """

    def __init__(self) -> None:
        self.min_heap: List[int] = []
        self.max_heap: List[int] = []

    def __len__(self) -> int:
        return len(self.min_heap)

    def insert_min(self, value: int) -> None:
        """Push value onto the min side (O(log n))."""
        heap = self.min_heap
        heap.append(value)
        index = len(heap) - 1
        while index > 0:
            parent = (index - 1) // 2
            if heap[index] >= heap[parent]:
                break
            heap[index], heap[parent] = heap[parent], heap[index]
            index = parent

    def insert_max(self, value: int) -> None:
        """Push value onto the max side (O(log n))."""
        heap = self.max_heap
        heap.append(value)
        index = len(heap) - 1
        while index > 0:
            parent = (index - 1) // 2
            if heap[index] <= heap[parent]:
                break
            heap[index], heap[parent] = heap[parent], heap[index]
            index = parent

    def push(self, value: int) -> None:
        """Push value onto both sides."""
        self.insert_min(value)
        self.insert_max(value)

    def peek_min(self) -> int:
        """
        Return the smallest value on the min side.

        Raises:
            EmptyStructureError: If the min side holds no values.
        """
        if not self.min_heap:
            raise EmptyStructureError("Min heap is empty.")
        return self.min_heap[0]

    def peek_max(self) -> int:
        """
        Return the largest value on the max side.

        Raises:
            EmptyStructureError: If the max side holds no values.
        """
        if not self.max_heap:
            raise EmptyStructureError("Max heap is empty.")
        return self.max_heap[0]

    def snapshot(self) -> Dict[str, List[int]]:
        """Copies of both backing arrays, in heap order."""
        return {"min_heap": list(self.min_heap), "max_heap": list(self.max_heap)}


DIGITS = "0123456789"


class PatternTrieNode:
    """Trie node over decimal digits."""

    __slots__ = ("children", "is_end_of_pattern", "frequency")

    def __init__(self) -> None:
        self.children: Dict[str, "PatternTrieNode"] = {}
        self.is_end_of_pattern: bool = False
        self.frequency: int = 0


class PatternTrie:
    """Prefix tree over the decimal form of guesses."""

    def __init__(self) -> None:
        self.root = PatternTrieNode()
        self._patterns: int = 0

    def __len__(self) -> int:
        """Number of distinct patterns stored."""
        return self._patterns

    def insert(self, pattern: str) -> None:
        """
        Insert one occurrence of a digit pattern.

        Raises:
            ValueError: If pattern is empty or contains a non-digit character.
        """
        if not pattern or any(ch not in DIGITS for ch in pattern):
            raise ValueError(f"Pattern must be a non-empty digit string, got {pattern!r}.")

        node = self.root
        for ch in pattern:
            child = node.children.get(ch)
            if child is None:
                child = PatternTrieNode()
                node.children[ch] = child
            node = child

        if not node.is_end_of_pattern:
            node.is_end_of_pattern = True
            self._patterns += 1
        node.frequency += 1

    def _walk(self, prefix: str) -> Optional[PatternTrieNode]:
        node = self.root
        for ch in prefix:
            node = node.children.get(ch)
            if node is None:
                return None
        return node

    def search(self, pattern: str) -> Optional[PatternTrieNode]:
        """Return the terminal node for pattern, or None if it was never inserted."""
        node = self._walk(pattern)
        if node is None or not node.is_end_of_pattern:
            return None
        return node

    def _collect(self, node: PatternTrieNode, prefix: str) -> List[Dict[str, Any]]:
        patterns: List[Dict[str, Any]] = []
        stack: List[Tuple[PatternTrieNode, str]] = [(node, prefix)]
        while stack:
            current, text = stack.pop()
            if current.is_end_of_pattern:
                patterns.append({"pattern": text, "frequency": current.frequency})
            # Reverse push so the smallest digit is visited first.
            for ch in sorted(current.children, reverse=True):
                stack.append((current.children[ch], text + ch))
        return patterns

    def enumerate_all(self) -> List[Dict[str, Any]]:
        """All stored patterns as {"pattern", "frequency"}, in depth-first digit order."""
        return self._collect(self.root, "")

    def starts_with(self, prefix: str) -> List[Dict[str, Any]]:
        """All stored patterns beginning with prefix (including prefix itself)."""
        node = self._walk(prefix)
        if node is None:
            return []
        return self._collect(node, prefix)
