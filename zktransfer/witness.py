"""Transfer witness assembly.

``WitnessAssembler.assemble`` runs the five stages in order:

1. commit both accounts and compute ``accounts_root``
2. hash the transaction
3. sign the transaction hash with the sender key
4. commit the updated accounts, giving ``intermediate_root`` (sender debited)
   and ``new_root`` (receiver credited)
5. collect everything into a ``Witness``

``Witness.to_inputs`` produces the circuit input record; every value is a
decimal string.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .account import Account, Transaction, commit, tx_hash
from .eddsa import EdDSA, PrivateKey, Signature
from .errors import InvalidTransfer, MalformedAmount, OutOfDomain, SignerMismatch
from .field import CryptoContext, check_field_element
from .ledger import LedgerAccumulator, MerkleProof, compute_root
from .mimc import Mimc7

logger = logging.getLogger(__name__)

SENDER_POS = 0
RECEIVER_POS = 1

_AMOUNT_RE = re.compile(r"[0-9]+")


def parse_amount(text: str) -> int:
    """Parse user supplied amount text; only plain decimal digits are accepted."""
    if text is None:
        raise MalformedAmount("no amount given")
    cleaned = str(text).strip()
    if not _AMOUNT_RE.fullmatch(cleaned):
        raise MalformedAmount(f"amount must be a non-negative integer, got {text!r}")
    return int(cleaned)


@dataclass(frozen=True)
class Witness:
    accounts_root: int
    intermediate_root: int
    new_root: int
    sender: Account
    receiver: Account
    amount: int
    tx_hash: int
    signature: Signature
    sender_proof: MerkleProof
    receiver_proof: MerkleProof

    def to_inputs(self) -> Dict[str, object]:
        sig = self.signature
        return {
            "accounts_root": str(self.accounts_root),
            "intermediate_root": str(self.intermediate_root),
            "accounts_balance": [str(self.sender.balance), str(self.receiver.balance)],
            "sender_pubkey": [str(v) for v in self.sender.public_key],
            "sender_balance": str(self.sender.balance),
            "receiver_pubkey": [str(v) for v in self.receiver.public_key],
            "receiver_balance": str(self.receiver.balance),
            "amount": str(self.amount),
            "signature_R8x": str(sig.R8[0]),
            "signature_R8y": str(sig.R8[1]),
            "signature_S": str(sig.S),
            "sender_proof": [str(v) for v in self.sender_proof.siblings],
            "sender_proof_pos": [str(v) for v in self.sender_proof.positions],
            "receiver_proof": [str(v) for v in self.receiver_proof.siblings],
            "receiver_proof_pos": [str(v) for v in self.receiver_proof.positions],
            "enabled": "1",
        }

    def to_json(self) -> str:
        return json.dumps(self.to_inputs(), separators=(",", ":"))


class WitnessAssembler:
    def __init__(self, ctx: CryptoContext, hasher: Optional[Mimc7] = None):
        self.ctx = ctx
        self.hasher = hasher or Mimc7(ctx)
        self.eddsa = EdDSA(ctx, self.hasher)

    def assemble(
        self,
        sender_key: PrivateKey,
        sender: Account,
        receiver: Account,
        amount: int,
    ) -> Witness:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise MalformedAmount(f"amount must be an integer, got {amount!r}")
        if amount < 0:
            raise InvalidTransfer(f"negative amount: {amount}")
        if amount > sender.balance:
            raise InvalidTransfer(f"insufficient balance: {sender.balance} < {amount}")

        # 1. commitments and the current root
        sender_leaf = commit(self.hasher, sender)
        receiver_leaf = commit(self.hasher, receiver)
        tree = LedgerAccumulator(self.hasher, [sender_leaf, receiver_leaf])
        accounts_root = tree.root
        logger.debug("accounts_root %d", accounts_root)

        # 2. transaction hash
        tx = Transaction(sender.public_key, receiver.public_key, amount)
        message = tx_hash(self.hasher, tx)
        logger.debug("tx_hash %d", message)

        # 3. signature; the signer must own the sender leaf
        signer_pub = self.eddsa.public_key(sender_key)
        if tuple(signer_pub) != tuple(sender.public_key):
            raise SignerMismatch("signing key does not match the sender public key")
        signature = self.eddsa.sign(sender_key, message)

        # 4. debit then credit, one leaf per root transition
        new_sender = sender.debit(amount)
        new_receiver = receiver.credit(amount)
        _, intermediate_root, mid_tree = tree.update(SENDER_POS, commit(self.hasher, new_sender))
        _, new_root, _ = mid_tree.update(RECEIVER_POS, commit(self.hasher, new_receiver))
        logger.debug("intermediate_root %d, new_root %d", intermediate_root, new_root)

        # 5. the receiver proof is taken from the intermediate tree
        return Witness(
            accounts_root=accounts_root,
            intermediate_root=intermediate_root,
            new_root=new_root,
            sender=sender,
            receiver=receiver,
            amount=amount,
            tx_hash=message,
            signature=signature,
            sender_proof=tree.proof_for(SENDER_POS),
            receiver_proof=mid_tree.proof_for(RECEIVER_POS),
        )

    def transfer(
        self,
        sender_key: PrivateKey,
        receiver_key: PrivateKey,
        sender_balance: int,
        receiver_balance: int,
        amount_source: Callable[[], int],
    ) -> Witness:
        """Build accounts from the two keys and ask ``amount_source`` for the amount."""
        amount = amount_source()
        sender = Account(self.eddsa.public_key(sender_key), sender_balance)
        receiver = Account(self.eddsa.public_key(receiver_key), receiver_balance)
        return self.assemble(sender_key, sender, receiver, amount)


def _num(inputs: Dict[str, object], name: str) -> int:
    if name not in inputs:
        raise OutOfDomain(f"missing field {name}")
    return check_field_element(inputs[name], name)


def _nums(inputs: Dict[str, object], name: str) -> List[int]:
    values = inputs.get(name)
    if not isinstance(values, list):
        raise OutOfDomain(f"field {name} must be a list")
    return [check_field_element(v, name) for v in values]


def verify_inputs(ctx: CryptoContext, inputs: Dict[str, object], hasher: Optional[Mimc7] = None) -> List[str]:
    """Re-check a serialized witness outside the circuit.

    Returns the names of the failed checks; an empty list means the record
    is consistent.
    """
    hasher = hasher or Mimc7(ctx)
    eddsa = EdDSA(ctx, hasher)
    failures = []

    sender_pub = tuple(_nums(inputs, "sender_pubkey"))
    receiver_pub = tuple(_nums(inputs, "receiver_pubkey"))
    sender_balance = _num(inputs, "sender_balance")
    receiver_balance = _num(inputs, "receiver_balance")
    amount = _num(inputs, "amount")
    sender_proof = MerkleProof(
        tuple(_nums(inputs, "sender_proof")), tuple(_nums(inputs, "sender_proof_pos"))
    )
    receiver_proof = MerkleProof(
        tuple(_nums(inputs, "receiver_proof")), tuple(_nums(inputs, "receiver_proof_pos"))
    )
    if len(sender_pub) != 2 or len(receiver_pub) != 2:
        raise OutOfDomain("public keys must be (x, y) pairs")

    if inputs.get("enabled") != "1":
        failures.append("enabled")
    if _nums(inputs, "accounts_balance") != [sender_balance, receiver_balance]:
        failures.append("accounts_balance")
    for name, proof in (("sender_proof", sender_proof), ("receiver_proof", receiver_proof)):
        if proof.depth != ctx.tree_depth or len(proof.positions) != ctx.tree_depth:
            failures.append(name + "_length")
        if any(pos not in (0, 1) for pos in proof.positions):
            failures.append(name + "_pos")
    if amount > sender_balance:
        failures.append("balance")
    if failures:
        return failures

    sender_leaf = hasher.hash([sender_pub[0], sender_pub[1], sender_balance])
    if compute_root(hasher, sender_leaf, sender_proof) != _num(inputs, "accounts_root"):
        failures.append("accounts_root")

    message = tx_hash(hasher, Transaction(sender_pub, receiver_pub, amount))
    signature = Signature(
        R8=(_num(inputs, "signature_R8x"), _num(inputs, "signature_R8y")),
        S=check_field_element(inputs.get("signature_S"), "signature_S"),
    )
    if not eddsa.verify(sender_pub, message, signature):
        failures.append("signature")

    intermediate_root = _num(inputs, "intermediate_root")
    new_sender_leaf = hasher.hash([sender_pub[0], sender_pub[1], sender_balance - amount])
    if compute_root(hasher, new_sender_leaf, sender_proof) != intermediate_root:
        failures.append("intermediate_root")
    receiver_leaf = hasher.hash([receiver_pub[0], receiver_pub[1], receiver_balance])
    if compute_root(hasher, receiver_leaf, receiver_proof) != intermediate_root:
        failures.append("receiver_proof")

    return failures
