"""EdDSA-MiMC signatures on Baby Jubjub.

Signing follows circomlib's ``signMiMC``/``verifyMiMC`` and the
``EdDSAMiMCVerifier`` template: the challenge is
``MultiMiMC7([R8.x, R8.y, A.x, A.y, msg], key=0)`` and verification checks

    S * B8 == R8 + (8 * challenge) * A

Keys are expanded from a 32-byte seed with SHA-512 and pruned the usual way.
circomlibjs expands with BLAKE-512 instead, so public keys derived here do
not match circomlibjs ``prv2pub`` test vectors for the same seed; the
signature equation checked in-circuit is unaffected.
The signing nonce is folded from the second half of the expanded key and the
message with the MiMC hasher, so identical inputs always give identical
signatures.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .babyjub import BabyJubjub, to_ints
from .errors import OutOfDomain
from .field import CryptoContext, check_field_element
from .mimc import Mimc7

logger = logging.getLogger(__name__)

SEED_SIZE = 32


@dataclass(frozen=True)
class PrivateKey:
    seed: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.seed, (bytes, bytearray)) or len(self.seed) != SEED_SIZE:
            raise OutOfDomain(f"private key seed must be {SEED_SIZE} bytes")

    @classmethod
    def from_hex(cls, text: str) -> "PrivateKey":
        """Parse a hex seed, left-padding short values with zeros."""
        text = text.lower()
        if text.startswith("0x"):
            text = text[2:]
        if len(text) > 2 * SEED_SIZE:
            raise OutOfDomain(f"private key seed must be {SEED_SIZE} bytes")
        try:
            return cls(bytes.fromhex(text.rjust(2 * SEED_SIZE, "0")))
        except ValueError as exc:
            raise OutOfDomain(f"private key seed is not hex: {text!r}") from exc


@dataclass(frozen=True)
class Signature:
    R8: Tuple[int, int]
    S: int


def _prune(buff: bytes) -> int:
    h = bytearray(buff[:32])
    h[0] &= 0xF8
    h[31] &= 0x7F
    h[31] |= 0x40
    return int.from_bytes(bytes(h), "little")


class EdDSA:
    def __init__(
        self,
        ctx: CryptoContext,
        hasher: Optional[Mimc7] = None,
        curve: Optional[BabyJubjub] = None,
    ):
        self.ctx = ctx
        self.hasher = hasher or Mimc7(ctx)
        self.curve = curve or BabyJubjub(ctx)

    def _expand(self, key: PrivateKey) -> Tuple[int, bytes]:
        hashed = hashlib.sha512(key.seed).digest()
        return _prune(hashed), hashed[32:]

    def private_scalar(self, key: PrivateKey) -> int:
        return self._expand(key)[0]

    def public_key(self, key: PrivateKey) -> Tuple[int, int]:
        s, _ = self._expand(key)
        return to_ints(self.curve.multiply(self.curve.base8, s >> 3))

    def keygen(self, seed: bytes) -> Tuple[PrivateKey, Tuple[int, int]]:
        key = PrivateKey(bytes(seed))
        return key, self.public_key(key)

    def challenge(self, r8: Tuple[int, int], pub: Tuple[int, int], msg: int) -> int:
        return self.hasher.multi_hash([r8[0], r8[1], pub[0], pub[1], msg], 0)

    def sign(self, key: PrivateKey, msg: int) -> Signature:
        msg = check_field_element(msg, "message")
        s, prefix = self._expand(key)
        base8 = self.curve.base8
        pub = to_ints(self.curve.multiply(base8, s >> 3))

        r = self.hasher.hash_bytes(prefix + msg.to_bytes(32, "little")) % self.ctx.suborder
        r8 = to_ints(self.curve.multiply(base8, r))
        hm = self.challenge(r8, pub, msg)
        S = (r + hm * s) % self.ctx.suborder
        logger.debug("signed message %d", msg)
        return Signature(R8=r8, S=S)

    def verify(self, pub: Tuple[int, int], msg: int, sig: Signature) -> bool:
        if not 0 <= sig.S < self.ctx.suborder:
            return False
        try:
            msg = check_field_element(msg, "message")
            a_point = self.curve.point(*pub)
            r_point = self.curve.point(*sig.R8)
        except OutOfDomain:
            return False

        hm = self.challenge(sig.R8, pub, msg)
        left = self.curve.multiply(self.curve.base8, sig.S)
        right = self.curve.add(r_point, self.curve.multiply(a_point, 8 * hm))
        return left == right
