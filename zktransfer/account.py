"""Accounts, transactions and their commitments."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

from .errors import InvalidTransfer, OutOfDomain
from .field import check_field_element
from .mimc import Mimc7


@dataclass(frozen=True)
class Account:
    public_key: Tuple[int, int]
    balance: int

    def __post_init__(self) -> None:
        if len(self.public_key) != 2:
            raise OutOfDomain("public key must be an (x, y) pair")
        object.__setattr__(self, "public_key", (
            check_field_element(self.public_key[0], "public key x"),
            check_field_element(self.public_key[1], "public key y"),
        ))
        # balances are hashed as field elements, not machine integers
        object.__setattr__(self, "balance", check_field_element(self.balance, "balance"))

    def debit(self, amount: int) -> "Account":
        if amount < 0:
            raise InvalidTransfer(f"negative amount: {amount}")
        if amount > self.balance:
            raise InvalidTransfer(
                f"insufficient balance: {self.balance} < {amount}"
            )
        return replace(self, balance=self.balance - amount)

    def credit(self, amount: int) -> "Account":
        if amount < 0:
            raise InvalidTransfer(f"negative amount: {amount}")
        return replace(self, balance=self.balance + amount)


@dataclass(frozen=True)
class Transaction:
    sender_pubkey: Tuple[int, int]
    receiver_pubkey: Tuple[int, int]
    amount: int

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise InvalidTransfer(f"negative amount: {self.amount}")
        check_field_element(self.amount, "amount")


def commit(hasher: Mimc7, account: Account) -> int:
    """Leaf value binding an account's key and balance."""
    x, y = account.public_key
    return hasher.hash([x, y, account.balance])


def tx_hash(hasher: Mimc7, tx: Transaction) -> int:
    sx, sy = tx.sender_pubkey
    rx, ry = tx.receiver_pubkey
    return hasher.hash([sx, sy, rx, ry, tx.amount])
