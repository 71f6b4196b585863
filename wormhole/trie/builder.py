"""
Module 02 - In-Memory Merkle-Patricia Trie
Root computation and proof generation over a key/value map.

Used to back in-memory chains and to produce proof fixtures. Proofs
follow eth_getProof conventions: root node first, only hashed nodes
listed, inline nodes embedded in their parents.

Construction Rules:
1. Keys are hashed with keccak256 when `secure=True` (state and storage tries)
2. Empty values delete the key
3. Nodes whose encoding is shorter than 32 bytes are inlined
4. The root is always referenced by hash
"""
from __future__ import annotations

from typing import Optional

from wormhole.crypto.hashing import keccak256
from wormhole.trie.account import EMPTY_ROOT_HASH
from wormhole.trie.nibbles import Nibbles, bytes_to_nibbles, common_prefix_length
from wormhole.trie.nodes import (
    BRANCH_WIDTH,
    BranchNode,
    ChildRef,
    ExtensionNode,
    LeafNode,
    TrieNode,
    encode_node,
)


class MerklePatriciaTrie:
    """
    Hexary Merkle-Patricia trie rebuilt from its items on demand.

    Example:
        >>> trie = MerklePatriciaTrie()
        >>> trie.put(b"key", b"value")
        >>> proof = trie.get_proof(b"key")
        >>> verify_proof(trie.root_hash, keccak256(b"key"), b"value", proof)
    """

    def __init__(self, *, secure: bool = True) -> None:
        self.secure = secure
        self._items: dict[bytes, bytes] = {}
        self._hashed: dict[bytes, TrieNode] = {}

    def _trie_key(self, key: bytes) -> bytes:
        return keccak256(key) if self.secure else key

    def put(self, key: bytes, value: bytes) -> None:
        if not value:
            self.delete(key)
            return
        self._items[self._trie_key(key)] = bytes(value)

    def get(self, key: bytes) -> Optional[bytes]:
        return self._items.get(self._trie_key(key))

    def delete(self, key: bytes) -> None:
        self._items.pop(self._trie_key(key), None)

    def __len__(self) -> int:
        return len(self._items)

    def _ref(self, node: TrieNode) -> ChildRef:
        encoded = encode_node(node)
        if len(encoded) < 32:
            return node
        node_hash = keccak256(encoded)
        self._hashed[node_hash] = node
        return node_hash

    def _build(self, items: list[tuple[Nibbles, bytes]], offset: int) -> TrieNode:
        if len(items) == 1:
            path, value = items[0]
            return LeafNode(path=path[offset:], value=value)

        # items are sorted, so the first and last share the common prefix of all
        shared = common_prefix_length(items[0][0][offset:], items[-1][0][offset:])
        if shared > 0:
            return ExtensionNode(
                path=items[0][0][offset:offset + shared],
                child=self._ref(self._build(items, offset + shared)),
            )

        value = b""
        groups: dict[int, list[tuple[Nibbles, bytes]]] = {}
        for path, item_value in items:
            if len(path) == offset:
                value = item_value
            else:
                groups.setdefault(path[offset], []).append((path, item_value))

        children: list[ChildRef] = [b""] * BRANCH_WIDTH
        for nibble, group in groups.items():
            children[nibble] = self._ref(self._build(group, offset + 1))
        return BranchNode(children=tuple(children), value=value)

    def _root_node(self) -> Optional[TrieNode]:
        self._hashed = {}
        if not self._items:
            return None
        items = sorted(
            (bytes_to_nibbles(key), value) for key, value in self._items.items()
        )
        return self._build(items, 0)

    @property
    def root_hash(self) -> bytes:
        root = self._root_node()
        if root is None:
            return EMPTY_ROOT_HASH
        return keccak256(encode_node(root))

    def get_proof(self, key: bytes) -> list[bytes]:
        """
        Return the inclusion or exclusion proof for `key`.

        An empty trie yields an empty proof.
        """
        root = self._root_node()
        if root is None:
            return []

        path = bytes_to_nibbles(self._trie_key(key))
        proof = [encode_node(root)]
        node: TrieNode = root
        offset = 0

        while True:
            if isinstance(node, LeafNode):
                break
            if isinstance(node, ExtensionNode):
                end = offset + len(node.path)
                if path[offset:end] != node.path:
                    break
                offset = end
                ref = node.child
            else:
                if offset == len(path):
                    break
                ref = node.children[path[offset]]
                offset += 1
                if ref == b"":
                    break

            if isinstance(ref, bytes):
                node = self._hashed[ref]
                proof.append(encode_node(node))
            else:
                node = ref

        return proof
