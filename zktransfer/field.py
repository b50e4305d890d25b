"""Shared crypto parameters.

Everything the hasher, the signature scheme and the ledger need to agree on
(field modulus, MiMC constants seed, Baby Jubjub parameters, tree depth) is
gathered in one frozen ``CryptoContext``.  Build it once with
``CryptoContext.default()`` and hand it to each component.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

cache_dir = os.path.join(tempfile.gettempdir(), "numba_cache")
os.makedirs(cache_dir, exist_ok=True)
os.environ.setdefault("NUMBA_CACHE_DIR", cache_dir)

import galois  # noqa: E402
from py_ecc.optimized_bn128 import curve_order  # noqa: E402

from .errors import OutOfDomain  # noqa: E402

# p = 21888242871839275222246405745257275088548364400416034343698204186575808495617
p = curve_order
FP = galois.GF(p)

MIMC_SEED = "mimc"
MIMC_ROUNDS = 91

# Baby Jubjub: a*x^2 + y^2 = 1 + d*x^2*y^2 over GF(p)
JUBJUB_A = 168700
JUBJUB_D = 168696
BASE8 = (
    5299619240641551281634865583518297030282874472190772894086521144482721001553,
    16950150798460657717958625567821834550301663161624707787222815936182638968203,
)
# order of the prime subgroup generated by BASE8 (curve order >> 3)
SUBORDER = 2736030358979909402780800718157159386076813972158567259200215660948447373041


@dataclass(frozen=True)
class CryptoContext:
    modulus: int
    mimc_seed: str
    mimc_rounds: int
    # key mixed into account/tree hashes; EdDSA challenges always use 0
    ledger_key: int
    curve_a: int
    curve_d: int
    base8: Tuple[int, int]
    suborder: int
    tree_depth: int = 1

    @classmethod
    def default(cls, tree_depth: int = 1) -> "CryptoContext":
        return cls(
            modulus=p,
            mimc_seed=MIMC_SEED,
            mimc_rounds=MIMC_ROUNDS,
            ledger_key=1,
            curve_a=JUBJUB_A,
            curve_d=JUBJUB_D,
            base8=BASE8,
            suborder=SUBORDER,
            tree_depth=tree_depth,
        )

    def __post_init__(self) -> None:
        if self.modulus != p:
            raise OutOfDomain("only the BN254 scalar field is supported")
        if self.mimc_rounds < 1:
            raise OutOfDomain("MiMC needs at least one round")
        if self.tree_depth < 1:
            raise OutOfDomain("tree depth must be at least 1")

    @property
    def leaf_count(self) -> int:
        return 2 ** self.tree_depth


def in_field(value: int) -> bool:
    return 0 <= value < p


def check_field_element(value, what: str = "value") -> int:
    if isinstance(value, (bool, float)):
        raise OutOfDomain(f"{what} is not an integer: {value!r}")
    try:
        n = int(value)
    except (TypeError, ValueError) as exc:
        raise OutOfDomain(f"{what} is not an integer: {value!r}") from exc
    if not in_field(n):
        raise OutOfDomain(f"{what} outside the field: {n}")
    return n


def to_field_vector(values: Iterable, what: str = "input") -> galois.FieldArray:
    ints = [check_field_element(v, what) for v in values]
    return FP(np.array(ints, dtype=object))
