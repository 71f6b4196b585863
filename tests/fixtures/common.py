"""
Common test fixtures shared by all modules.

Provides:
- TEST_SECRET: an 8-byte secret valid at the production difficulty
- make_secret: a fresh 32-byte secret at a low test difficulty
- make_program_input: a witness assembled straight from an InMemoryChain
- withdraw_and_record: run the program and write the result to the registry

Production-difficulty secrets take ~16M hashes to find, so everything
except the program tests built on TEST_SECRET uses LOW_DIFFICULTY.
"""

from typing import Optional, Union

from wormhole.chain.registry import apply_withdrawal
from wormhole.crypto.secret import WormholeSecret, deposit_address, generate_secret, nullifier
from wormhole.program.entry import execute_wormhole_program
from wormhole.schemas.program import WormholeProgramInput, WormholeProgramOutput

from .chain import InMemoryChain


# sha256(0x02 ‖ TEST_SECRET) has its low 24 bits cleared.
TEST_SECRET = bytes.fromhex("0000000001305dc6")

LOW_DIFFICULTY = 4


def make_secret(difficulty: int = LOW_DIFFICULTY) -> WormholeSecret:
    """Find a 32-byte secret at a low difficulty."""
    return generate_secret(difficulty, max_attempts=1 << 16)


def fund_deposit(chain: InMemoryChain, secret: bytes, amount: int, *, mine: bool = True) -> None:
    chain.deposit(deposit_address(secret), amount)
    if mine:
        chain.mine()


def make_program_input(
    chain: InMemoryChain,
    secret: bytes,
    *,
    withdraw: int,
    cumulative: int = 0,
    index: int = 0,
    deposit: Optional[int] = None,
    block: Union[int, str] = "latest",
) -> WormholeProgramInput:
    """Assemble a witness from chain proofs, without the witness builder's checks."""
    header = chain.get_block(block)
    deposit_proof = chain.get_proof(deposit_address(secret), [], header.number)

    slots = [nullifier(secret, index - 1)] if index > 0 else []
    registry_proof = chain.get_proof(chain.registry_address, slots, header.number)
    previous = registry_proof.storage_proof[0].proof if index > 0 else []

    return WormholeProgramInput(
        secret=secret,
        deposit_amount=deposit_proof.balance if deposit is None else deposit,
        withdraw_amount=withdraw,
        cumulative_withdrawn_amount=cumulative,
        withdrawal_index=index,
        state_root=header.state_root,
        deposit_account_proof=deposit_proof.account_proof,
        nullifier_address=chain.registry_address,
        nullifier_account_proof=registry_proof.account_proof,
        previous_nullifier_storage_proof=previous,
        block_number=header.number,
        block_hash=header.hash,
    )


def withdraw_and_record(
    chain: InMemoryChain,
    secret: bytes,
    *,
    withdraw: int,
    cumulative: int = 0,
    index: int = 0,
    difficulty: int = LOW_DIFFICULTY,
) -> WormholeProgramOutput:
    """Prove one withdrawal, mark its nullifier spent and seal a block."""
    program_input = make_program_input(
        chain, secret, withdraw=withdraw, cumulative=cumulative, index=index
    )
    output = execute_wormhole_program(program_input, pow_log_difficulty=difficulty)
    apply_withdrawal(chain.registry, output, caller=chain.registry.owner)
    chain.mine()
    return output
