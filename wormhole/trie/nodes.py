"""
Module 02 - Merkle-Patricia Trie Nodes
Decoding and encoding of the three trie node kinds.

Node encoding (RLP):
- Branch:    17-item list, 16 child references followed by a value
- Extension: [hex_prefix(path, leaf=False), child reference]
- Leaf:      [hex_prefix(path, leaf=True), value]

Child references are either a 32-byte keccak hash of the child's
encoding, an inline child (encoding shorter than 32 bytes), or empty.

Any encoding that does not fit these shapes is malformed and raises
StateProofException; nothing here tries to repair input.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

import rlp
from rlp.exceptions import RLPException

from wormhole.constants import HASH_LENGTH
from wormhole.schemas.errors import StateProofException
from wormhole.trie.nibbles import Nibbles, decode_hex_prefix, encode_hex_prefix


BRANCH_WIDTH = 16


@dataclass(frozen=True)
class LeafNode:
    path: Nibbles
    value: bytes


@dataclass(frozen=True)
class ExtensionNode:
    path: Nibbles
    child: "ChildRef"


@dataclass(frozen=True)
class BranchNode:
    children: tuple["ChildRef", ...]
    value: bytes = b""


TrieNode = Union[LeafNode, ExtensionNode, BranchNode]

# A 32-byte hash, an inline node, or b"" for no child.
ChildRef = Union[bytes, TrieNode]


def _child_from_raw(item: Any) -> ChildRef:
    if isinstance(item, list):
        return node_from_raw(item)
    if len(item) in (0, HASH_LENGTH):
        return bytes(item)
    raise StateProofException(
        f"invalid child reference length: {len(item)}",
        details={"length": len(item)},
    )


def node_from_raw(raw: Any) -> TrieNode:
    """Build a node from a decoded RLP structure."""
    if not isinstance(raw, list):
        raise StateProofException("trie node must be an RLP list")

    if len(raw) == BRANCH_WIDTH + 1:
        value = raw[BRANCH_WIDTH]
        if not isinstance(value, bytes):
            raise StateProofException("branch value must be a byte string")
        children = tuple(_child_from_raw(item) for item in raw[:BRANCH_WIDTH])
        return BranchNode(children=children, value=value)

    if len(raw) == 2:
        encoded_path, second = raw
        if not isinstance(encoded_path, bytes):
            raise StateProofException("node path must be a byte string")
        try:
            path, is_leaf = decode_hex_prefix(encoded_path)
        except ValueError as e:
            raise StateProofException(f"invalid node path: {e}") from e

        if is_leaf:
            if not isinstance(second, bytes):
                raise StateProofException("leaf value must be a byte string")
            return LeafNode(path=path, value=second)

        if not path:
            raise StateProofException("extension node with empty path")
        child = _child_from_raw(second)
        if child == b"":
            raise StateProofException("extension node without child")
        return ExtensionNode(path=path, child=child)

    raise StateProofException(
        f"trie node must have 2 or 17 items, got {len(raw)}",
        details={"items": len(raw)},
    )


def decode_node(encoded: bytes) -> TrieNode:
    """
    Decode an RLP-encoded trie node.

    Raises:
        StateProofException: If the bytes are not a well-formed node
    """
    try:
        raw = rlp.decode(encoded)
    except RLPException as e:
        raise StateProofException(f"trie node decoding failed: {e}") from e
    return node_from_raw(raw)


def _child_to_raw(child: ChildRef) -> Any:
    if isinstance(child, bytes):
        return child
    return node_to_raw(child)


def node_to_raw(node: TrieNode) -> list[Any]:
    if isinstance(node, LeafNode):
        return [encode_hex_prefix(node.path, is_leaf=True), node.value]
    if isinstance(node, ExtensionNode):
        return [encode_hex_prefix(node.path, is_leaf=False), _child_to_raw(node.child)]
    return [_child_to_raw(child) for child in node.children] + [node.value]


def encode_node(node: TrieNode) -> bytes:
    """RLP-encode a trie node."""
    return rlp.encode(node_to_raw(node))
