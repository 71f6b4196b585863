"""
Module 02 - Merkle-Patricia Trie
Node codec, proof verification and an in-memory trie for proof generation.

Usage:
    from wormhole.trie import MerklePatriciaTrie, verify_proof
    from wormhole.crypto import keccak256

    trie = MerklePatriciaTrie()
    trie.put(address, account.to_rlp())
    proof = trie.get_proof(address)
    verify_proof(trie.root_hash, keccak256(address), account.to_rlp(), proof)
"""
from .account import (
    EMPTY_ROOT_HASH,
    KECCAK_EMPTY,
    TrieAccount,
    encode_storage_value,
    decode_storage_value,
)
from .nodes import (
    BranchNode,
    ExtensionNode,
    LeafNode,
    TrieNode,
    decode_node,
    encode_node,
)
from .proof import get_proof_value, verify_proof
from .builder import MerklePatriciaTrie


__all__ = [
    "EMPTY_ROOT_HASH",
    "KECCAK_EMPTY",
    "TrieAccount",
    "encode_storage_value",
    "decode_storage_value",
    "BranchNode",
    "ExtensionNode",
    "LeafNode",
    "TrieNode",
    "decode_node",
    "encode_node",
    "get_proof_value",
    "verify_proof",
    "MerklePatriciaTrie",
]
