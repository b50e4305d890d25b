"""MiMC7 sponge-less multi-hash over the BN254 scalar field.

Matches circomlib's ``MiMC7``/``MultiMiMC7`` templates: 91 rounds of
``x -> (x + k + c_i)^7`` with round constants derived by iterating keccak256
from the seed ``"mimc"``, and the Miyaguchi-Preneel style chaining

    r_0 = key
    r_{i+1} = r_i + x_i + E_{r_i}(x_i)

The hash used off-circuit must be the one constrained in-circuit, so the
constants and round structure here are not tunable per call.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import List, Sequence

import galois
from Crypto.Hash import keccak

from .field import FP, CryptoContext, check_field_element, p, to_field_vector

logger = logging.getLogger(__name__)

# bytes packed into one field element by hash_bytes
CHUNK_SIZE = 31


def keccak256(data: bytes) -> bytes:
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


@lru_cache(maxsize=None)
def get_constants(seed: str, n_rounds: int) -> List[int]:
    cts = [0]
    c = keccak256(seed.encode())
    for _ in range(1, n_rounds):
        c = keccak256(c)
        cts.append(int.from_bytes(c, "big") % p)
    return cts


class Mimc7:
    def __init__(self, ctx: CryptoContext):
        self.ctx = ctx
        self.n_rounds = ctx.mimc_rounds
        self.cts = FP(get_constants(ctx.mimc_seed, ctx.mimc_rounds))

    def mimc7_hash(self, x_in: galois.FieldArray, k: galois.FieldArray) -> galois.FieldArray:
        """One keyed MiMC7 permutation of ``x_in``."""
        h = FP(0)
        for i in range(self.n_rounds):
            if i == 0:
                t = x_in + k
            else:
                t = h + k + self.cts[i]
            h = t ** 7
        return h + k

    def multi_hash(self, values: Sequence[int], key: int = 0) -> int:
        """Hash a sequence of field elements with an explicit chaining key."""
        arr = to_field_vector(values, "hash input")
        r = FP(check_field_element(key, "hash key"))
        for i in range(arr.size):
            x = arr[i]
            r = r + x + self.mimc7_hash(x, r)
        return int(r)

    def hash(self, values: Sequence[int]) -> int:
        """Ledger hash: commitments, tree nodes and the transaction hash."""
        return self.multi_hash(values, self.ctx.ledger_key)

    def hash_bytes(self, data: bytes, key: int = 0) -> int:
        # 31 little-endian bytes always fit below p
        ints = [
            int.from_bytes(data[i:i + CHUNK_SIZE], "little")
            for i in range(0, len(data), CHUNK_SIZE)
        ]
        logger.debug("hash_bytes: %d bytes in %d chunks", len(data), len(ints))
        return self.multi_hash(ints, key)
