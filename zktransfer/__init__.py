from .account import Account, Transaction, commit, tx_hash
from .babyjub import BabyJubjub
from .eddsa import EdDSA, PrivateKey, Signature
from .errors import (
    InvalidTransfer,
    MalformedAmount,
    OutOfDomain,
    SignerMismatch,
    WitnessError,
)
from .field import CryptoContext
from .ledger import LedgerAccumulator, MerkleProof, compute_root, verify_proof
from .mimc import Mimc7
from .witness import Witness, WitnessAssembler, parse_amount, verify_inputs

__all__ = [
    "Account",
    "BabyJubjub",
    "CryptoContext",
    "EdDSA",
    "InvalidTransfer",
    "LedgerAccumulator",
    "MalformedAmount",
    "MerkleProof",
    "Mimc7",
    "OutOfDomain",
    "PrivateKey",
    "Signature",
    "SignerMismatch",
    "Transaction",
    "Witness",
    "WitnessAssembler",
    "WitnessError",
    "commit",
    "compute_root",
    "parse_amount",
    "tx_hash",
    "verify_inputs",
    "verify_proof",
]
