"""
Core cryptographic utilities.

Hashing helpers plus the secret derivations and proof-of-work gate.
"""
from .hashing import (
    sha256,
    keccak256,
    to_hex,
    from_hex,
    to_be32,
    to_le32,
    hash_amount,
)
from .secret import (
    WormholeSecret,
    deposit_address,
    nullifier,
    proof_of_work_hash,
    check_pow,
    parse_secret,
    iter_candidate_secrets,
    generate_secret,
)

__all__ = [
    "sha256",
    "keccak256",
    "to_hex",
    "from_hex",
    "to_be32",
    "to_le32",
    "hash_amount",
    "WormholeSecret",
    "deposit_address",
    "nullifier",
    "proof_of_work_hash",
    "check_pow",
    "parse_secret",
    "iter_candidate_secrets",
    "generate_secret",
]
