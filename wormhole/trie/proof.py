"""
Module 02 - Merkle-Patricia Proof Verification

A proof is the ordered list of hashed nodes on the path from the root to
a key, as returned by eth_getProof. Inline nodes are not listed; they are
read from their parent.

Verification Rules (Hard Contracts):
1. The first node must hash (keccak256) to the root
2. Each hashed child reference must equal the hash of the next node
3. The walk ends at a matching leaf (inclusion), or where the path leaves
   the trie (exclusion)
4. Every node in the proof must be consumed by the walk
5. An empty proof only proves absence from the empty trie
"""
from __future__ import annotations

from typing import Optional, Sequence

from wormhole.crypto.hashing import keccak256, to_hex
from wormhole.schemas.errors import StateProofException
from wormhole.trie.account import EMPTY_ROOT_HASH
from wormhole.trie.nibbles import bytes_to_nibbles
from wormhole.trie.nodes import BranchNode, ExtensionNode, LeafNode, TrieNode, decode_node


def _load_node(
    proof: Sequence[bytes],
    index: int,
    expected_hash: bytes,
    label: str,
) -> TrieNode:
    if index >= len(proof):
        raise StateProofException(
            "proof ends before the walk does",
            proof=label,
            details={"node_index": index},
        )
    encoded = bytes(proof[index])
    if keccak256(encoded) != expected_hash:
        raise StateProofException(
            "node hash does not match its reference",
            proof=label,
            details={"node_index": index, "expected": to_hex(expected_hash)},
        )
    return decode_node(encoded)


def get_proof_value(
    root: bytes,
    key: bytes,
    proof: Sequence[bytes],
    *,
    label: str = "proof",
) -> Optional[bytes]:
    """
    Walk a proof and return the value it authenticates for `key`.

    Args:
        root: Trie root hash
        key: Trie key (already hashed for secure tries)
        proof: Proof nodes, root first
        label: Name of the proof for error details

    Returns:
        The leaf value, or None if the proof shows the key is absent

    Raises:
        StateProofException: On any malformed or inconsistent proof
    """
    if len(proof) == 0:
        if root == EMPTY_ROOT_HASH:
            return None
        raise StateProofException(
            "empty proof for a non-empty trie",
            proof=label,
        )

    path = bytes_to_nibbles(key)
    node = _load_node(proof, 0, root, label)
    used = 1
    offset = 0

    while True:
        if isinstance(node, LeafNode):
            value = node.value if path[offset:] == node.path else None
            break

        if isinstance(node, ExtensionNode):
            end = offset + len(node.path)
            if path[offset:end] != node.path:
                value = None
                break
            offset = end
            ref = node.child
        else:
            assert isinstance(node, BranchNode)
            if offset == len(path):
                value = node.value or None
                break
            ref = node.children[path[offset]]
            offset += 1
            if ref == b"":
                value = None
                break

        if isinstance(ref, bytes):
            node = _load_node(proof, used, ref, label)
            used += 1
        else:
            node = ref

    if used != len(proof):
        raise StateProofException(
            "proof contains nodes beyond the end of the walk",
            proof=label,
            details={"used": used, "total": len(proof)},
        )
    return value


def verify_proof(
    root: bytes,
    key: bytes,
    expected: Optional[bytes],
    proof: Sequence[bytes],
    *,
    label: str = "proof",
) -> None:
    """
    Verify that `proof` binds `key` to `expected` under `root`.

    `expected=None` asserts the key is absent.

    Raises:
        StateProofException: If the proof is malformed or shows another value
    """
    actual = get_proof_value(root, key, proof, label=label)
    if actual != expected:
        raise StateProofException(
            "proven value does not match the expected value",
            proof=label,
            details={
                "expected": to_hex(expected) if expected is not None else None,
                "actual": to_hex(actual) if actual is not None else None,
            },
        )


__all__ = [
    "get_proof_value",
    "verify_proof",
]
