"""
Module 00 - Schemas

Error taxonomy, field types and verification results. Program, chain and
transaction records live in their own modules:

    from wormhole.schemas.program import WormholeProgramInput
    from wormhole.schemas.chain import AccountProof
    from wormhole.schemas.transaction import WormholeTx
"""

from .errors import (
    ErrorCodes,
    WormholeError,
    WormholeException,
    InputMalformedException,
    ProofOfWorkException,
    SecretSearchExhausted,
    StateProofException,
    NullifierAccountMissing,
    NullifierChainException,
    AccountingException,
    ExternalFetchException,
    ProgramAbortedException,
    CanonicalizationException,
)
from .types import (
    Address,
    Hash32,
    HexBytes,
    ProofNodes,
    Uint256,
)
from .verification import (
    CheckResult,
    CheckSeverity,
    VerificationResult,
)

__all__ = [
    "ErrorCodes",
    "WormholeError",
    "WormholeException",
    "InputMalformedException",
    "ProofOfWorkException",
    "SecretSearchExhausted",
    "StateProofException",
    "NullifierAccountMissing",
    "NullifierChainException",
    "AccountingException",
    "ExternalFetchException",
    "ProgramAbortedException",
    "CanonicalizationException",
    "Address",
    "Hash32",
    "HexBytes",
    "ProofNodes",
    "Uint256",
    "CheckResult",
    "CheckSeverity",
    "VerificationResult",
]
