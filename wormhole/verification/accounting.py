"""
Module 03 - Withdrawal-Accounting Checker

Checked 256-bit arithmetic over deposit and withdraw amounts:
- withdraw_amount > 0
- withdraw_amount + cumulative_withdrawn_amount fits in 256 bits
- withdraw_amount + cumulative_withdrawn_amount <= deposit_amount
"""
from __future__ import annotations

from wormhole.constants import U256_MAX
from wormhole.schemas.errors import AccountingException, InputMalformedException


def checked_add(a: int, b: int) -> int:
    """
    Add two uint256 values.

    Raises:
        AccountingException: If the sum overflows 256 bits
    """
    total = a + b
    if total > U256_MAX:
        raise AccountingException(
            "withdrawn amount overflows 256 bits",
            details={"overflow_by": total - U256_MAX},
        )
    return total


def _require_uint256(name: str, value: int) -> None:
    if value < 0 or value > U256_MAX:
        raise InputMalformedException(
            f"{name} is outside the uint256 range",
            field_path=name,
        )


def check_withdrawal_amounts(
    deposit_amount: int,
    withdraw_amount: int,
    cumulative_withdrawn_amount: int,
) -> int:
    """
    Validate one withdrawal and return the next cumulative withdrawn amount.

    Raises:
        InputMalformedException: If any amount is negative or wider than 256 bits
        AccountingException: On a zero withdrawal, overflow or over-withdrawal
    """
    _require_uint256("deposit_amount", deposit_amount)
    _require_uint256("withdraw_amount", withdraw_amount)
    _require_uint256("cumulative_withdrawn_amount", cumulative_withdrawn_amount)

    if withdraw_amount == 0:
        raise AccountingException("withdraw amount must be positive")

    next_cumulative = checked_add(withdraw_amount, cumulative_withdrawn_amount)
    if next_cumulative > deposit_amount:
        raise AccountingException(
            "withdrawal exceeds the deposited amount",
            details={
                "deposit_amount": deposit_amount,
                "next_cumulative_withdrawn_amount": next_cumulative,
            },
        )
    return next_cumulative


__all__ = [
    "checked_add",
    "check_withdrawal_amounts",
]
