"""
Module 05 - Witness Builder
Assembles WormholeProgramInput from live chain data.

Build Steps:
1. Validate the request (secret length and proof-of-work, amounts)
2. Pin the target block: number, hash and state root
3. Resolve the withdrawal index (explicit, or probe the registry upward from 0)
4. For index > 0, check the previous nullifier records hash(cumulative)
5. Fetch the deposit account proof, the registry account proof and the
   previous-nullifier storage proof concurrently under one timeout
6. Re-read the pinned block and fail if its hash changed (reorg)
7. Check the deposit account and assemble the witness

The builder is the only component that talks to the chain. Failed
fetches surface as ExternalFetchException naming the failing fetch.
"""
from __future__ import annotations

import logging
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from wormhole.constants import MAX_DEPOSIT, POW_LOG_DIFFICULTY
from wormhole.crypto.hashing import hash_amount, to_hex
from wormhole.crypto.secret import WormholeSecret, parse_secret
from wormhole.program.entry import execute_wormhole_program
from wormhole.schemas.chain import AccountProof, BlockHeader
from wormhole.schemas.errors import (
    AccountingException,
    ExternalFetchException,
    InputMalformedException,
    NullifierChainException,
    StateProofException,
)
from wormhole.schemas.program import WormholeProgramInput
from wormhole.schemas.types import Address, HexBytes, Uint256
from wormhole.trie.account import EMPTY_ROOT_HASH, KECCAK_EMPTY
from wormhole.verification.accounting import checked_add

from .source import BlockId, ChainDataSource


logger = logging.getLogger(__name__)

ZERO_WORD = b"\x00" * 32

FETCH_BLOCK = "block"
FETCH_DEPOSIT = "deposit_account_proof"
FETCH_NULLIFIER = "nullifier_account_proof"
FETCH_PREVIOUS = "previous_nullifier_storage_proof"


class WitnessRequest(BaseModel):
    """What the caller knows when asking for a witness."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    secret: HexBytes
    nullifier_address: Address
    withdraw_amount: Uint256
    withdrawal_index: Optional[Uint256] = None
    cumulative_withdrawn_amount: Uint256 = 0
    block: BlockId = Field(
        default="latest",
        description="Block number or tag to build against",
    )

    @classmethod
    def parse(cls, **fields: Any) -> "WitnessRequest":
        """
        Validate raw request fields.

        Raises:
            InputMalformedException: If any field is invalid
        """
        try:
            return cls(**fields)
        except ValidationError as e:
            first = e.errors()[0]
            raise InputMalformedException(
                f"invalid witness request: {first['msg']}",
                field_path=".".join(str(p) for p in first["loc"]) or None,
            ) from e


def _tag_fetch(error: ExternalFetchException, fetch: str, block: BlockId) -> ExternalFetchException:
    if error.fetch is not None and error.fetch != fetch:
        error.details.setdefault("source_fetch", error.fetch)
    error.fetch = fetch
    error.details["fetch"] = fetch
    error.details.setdefault("block", block)
    return error


class WitnessBuilder:
    """
    Builds program inputs from a ChainDataSource.

    Usage:
        source = JsonRpcChainSource(JsonRpcClient(url))
        builder = WitnessBuilder(source)
        witness = builder.build(WitnessRequest(secret=..., nullifier_address=..., withdraw_amount=10))
    """

    def __init__(
        self,
        source: ChainDataSource,
        *,
        pow_log_difficulty: int = POW_LOG_DIFFICULTY,
        max_index_probe: int = 1024,
        fetch_timeout: float = 60.0,
        max_workers: int = 3,
        max_deposit: int = MAX_DEPOSIT,
        preflight: bool = True,
    ) -> None:
        self.source = source
        self.pow_log_difficulty = pow_log_difficulty
        self.max_index_probe = max_index_probe
        self.fetch_timeout = fetch_timeout
        self.max_workers = max_workers
        self.max_deposit = max_deposit
        self.preflight = preflight

    def build(self, request: WitnessRequest) -> WormholeProgramInput:
        """
        Build and return the witness for one withdrawal.

        Raises:
            InputMalformedException: Bad secret
            ProofOfWorkException: Secret fails the proof-of-work
            AccountingException: Zero or excessive withdrawal
            NullifierChainException: Index or cumulative amount inconsistent
                with the registry
            ExternalFetchException: Chain data unavailable, timed out or reorged
            StateProofException: Deposit address already used, or preflight
                found a proof that does not verify
        """
        secret = parse_secret(request.secret, difficulty=self.pow_log_difficulty)
        if request.withdraw_amount == 0:
            raise AccountingException("withdraw amount must be positive")
        required = checked_add(request.withdraw_amount, request.cumulative_withdrawn_amount)

        header = self._fetch(FETCH_BLOCK, request.block, lambda: self.source.get_block(request.block))
        block = header.number
        logger.info(
            f"Pinned block {block} ({to_hex(header.hash)}) "
            f"state root {to_hex(header.state_root)}"
        )

        index = self.resolve_withdrawal_index(secret, request, block)
        if index > 0:
            self.check_previous_slot(secret, request, index, block)

        deposit_proof, nullifier_proof, previous_proof = self._fetch_proofs(
            secret, request.nullifier_address, index, block
        )

        self._check_not_reorged(header)
        self._check_deposit_account(deposit_proof, required)

        program_input = WormholeProgramInput(
            secret=secret.value,
            deposit_amount=deposit_proof.balance,
            withdraw_amount=request.withdraw_amount,
            cumulative_withdrawn_amount=request.cumulative_withdrawn_amount,
            withdrawal_index=index,
            state_root=header.state_root,
            deposit_account_proof=deposit_proof.account_proof,
            nullifier_address=request.nullifier_address,
            nullifier_account_proof=nullifier_proof.account_proof,
            previous_nullifier_storage_proof=previous_proof,
            block_number=block,
            block_hash=header.hash,
        )

        if self.preflight:
            execute_wormhole_program(
                program_input, pow_log_difficulty=self.pow_log_difficulty
            )
        logger.info(f"Built witness for withdrawal index {index} at block {block}")
        return program_input

    def resolve_withdrawal_index(
        self,
        secret: WormholeSecret,
        request: WitnessRequest,
        block: int,
    ) -> int:
        """
        Return the index of the next withdrawal.

        An explicit index must point at an unspent nullifier. Otherwise
        registry slots are probed upward from 0 until an empty one is found.
        """
        if request.withdrawal_index is not None:
            index = request.withdrawal_index
            if self._read_slot(request.nullifier_address, secret.nullifier(index), block) != ZERO_WORD:
                raise NullifierChainException(
                    "withdrawal index already spent",
                    withdrawal_index=index,
                )
            return index

        for index in range(self.max_index_probe):
            word = self._read_slot(request.nullifier_address, secret.nullifier(index), block)
            if word == ZERO_WORD:
                logger.debug(f"Resolved withdrawal index {index} by probing")
                return index

        raise NullifierChainException(
            "no unspent nullifier within the probe limit",
            details={"max_index_probe": self.max_index_probe},
        )

    def check_previous_slot(
        self,
        secret: WormholeSecret,
        request: WitnessRequest,
        index: int,
        block: int,
    ) -> None:
        """Fail early if the previous nullifier does not record the claimed total."""
        word = self._read_slot(request.nullifier_address, secret.nullifier(index - 1), block)
        if word != hash_amount(request.cumulative_withdrawn_amount):
            raise NullifierChainException(
                "previous nullifier does not record the claimed cumulative amount",
                withdrawal_index=index,
                details={"previous_nullifier_recorded": word != ZERO_WORD},
            )

    def _read_slot(self, address: bytes, slot: bytes, block: int) -> bytes:
        return self._fetch(
            "nullifier_slot",
            block,
            lambda: self.source.get_storage_at(address, slot, block),
        )

    def _fetch(self, name: str, block: BlockId, fn: Callable[[], Any]) -> Any:
        try:
            return fn()
        except ExternalFetchException as e:
            raise _tag_fetch(e, name, block)

    def _fetch_proofs(
        self,
        secret: WormholeSecret,
        nullifier_address: bytes,
        index: int,
        block: int,
    ) -> tuple[AccountProof, AccountProof, list[bytes]]:
        tasks: dict[str, Callable[[], AccountProof]] = {
            FETCH_DEPOSIT: lambda: self.source.get_proof(secret.deposit_address(), [], block),
            FETCH_NULLIFIER: lambda: self.source.get_proof(nullifier_address, [], block),
        }
        previous_slot = secret.nullifier(index - 1) if index > 0 else None
        if previous_slot is not None:
            tasks[FETCH_PREVIOUS] = lambda: self.source.get_proof(
                nullifier_address, [previous_slot], block
            )

        executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="witness-fetch"
        )
        try:
            futures: dict[str, Future] = {
                name: executor.submit(task) for name, task in tasks.items()
            }
            done, pending = wait(
                futures.values(), timeout=self.fetch_timeout, return_when=FIRST_EXCEPTION
            )
            for name, future in futures.items():
                if future in done and future.exception() is not None:
                    error = future.exception()
                    logger.warning(f"Fetch {name} failed: {error}")
                    if isinstance(error, ExternalFetchException):
                        raise _tag_fetch(error, name, block)
                    raise ExternalFetchException(
                        f"{name} failed: {error}", fetch=name, block=block
                    ) from error
            if pending:
                names = [name for name, future in futures.items() if future in pending]
                raise ExternalFetchException(
                    f"timed out after {self.fetch_timeout}s waiting for {', '.join(names)}",
                    fetch=names[0],
                    block=block,
                    details={"pending": names},
                )
            results = {name: future.result() for name, future in futures.items()}
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        nullifier_proof = results[FETCH_NULLIFIER]
        previous_proof: list[bytes] = []
        if previous_slot is not None:
            previous = results[FETCH_PREVIOUS]
            if previous.storage_hash != nullifier_proof.storage_hash:
                raise ExternalFetchException(
                    "registry storage root differs between proofs of the same block",
                    fetch=FETCH_PREVIOUS,
                    block=block,
                )
            entry = previous.storage_proof_for(previous_slot)
            if entry is None:
                raise ExternalFetchException(
                    "node omitted the previous nullifier storage proof",
                    fetch=FETCH_PREVIOUS,
                    block=block,
                    retryable=False,
                )
            previous_proof = list(entry.proof)
        return results[FETCH_DEPOSIT], nullifier_proof, previous_proof

    def _check_not_reorged(self, header: BlockHeader) -> None:
        current = self._fetch(
            FETCH_BLOCK, header.number, lambda: self.source.get_block(header.number)
        )
        if current.hash != header.hash:
            raise ExternalFetchException(
                "block was reorganized while building the witness",
                fetch=FETCH_BLOCK,
                block=header.number,
                details={"pinned_hash": to_hex(header.hash), "current_hash": to_hex(current.hash)},
            )

    def _check_deposit_account(self, proof: AccountProof, required: int) -> None:
        if proof.nonce != 0 or proof.code_hash != KECCAK_EMPTY or proof.storage_hash != EMPTY_ROOT_HASH:
            raise StateProofException(
                "deposit address is not an unused account without code or storage",
                proof="deposit_account",
                details={"nonce": proof.nonce, "code_hash": to_hex(proof.code_hash)},
            )
        if proof.balance < required:
            raise AccountingException(
                "withdrawal exceeds the deposited amount",
                details={"deposit_amount": proof.balance, "required": required},
            )
        if proof.balance > self.max_deposit:
            logger.warning(
                f"Deposit of {proof.balance} wei exceeds the protocol maximum "
                f"of {self.max_deposit} wei"
            )
