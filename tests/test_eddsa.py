import hashlib

import pytest

from zktransfer import OutOfDomain, PrivateKey, Signature
from zktransfer.field import p

MESSAGE = 1234567890


def test_from_hex_pads_like_the_seed_files():
    assert PrivateKey.from_hex("1").seed == b"\x00" * 31 + b"\x01"
    assert PrivateKey.from_hex("0x02").seed == b"\x00" * 31 + b"\x02"


@pytest.mark.parametrize("text", ["zz", "1" * 65])
def test_from_hex_rejects_bad_seeds(text):
    with pytest.raises(OutOfDomain):
        PrivateKey.from_hex(text)


def test_seed_length_is_enforced():
    with pytest.raises(OutOfDomain):
        PrivateKey(b"\x01" * 31)


def test_keygen_is_deterministic(eddsa, sender_key):
    key, pub = eddsa.keygen(sender_key.seed)
    assert key == sender_key
    assert pub == eddsa.public_key(sender_key)
    assert eddsa.curve.is_on_curve(eddsa.curve.point(*pub))


def test_distinct_seeds_give_distinct_keys(eddsa, sender_key, receiver_key):
    assert eddsa.public_key(sender_key) != eddsa.public_key(receiver_key)


def test_private_scalar_is_pruned(eddsa, sender_key):
    s = eddsa.private_scalar(sender_key)
    assert s % 8 == 0
    assert s >> 254 == 1


def test_sign_and_verify(eddsa, sender_key):
    sig = eddsa.sign(sender_key, MESSAGE)
    assert 0 <= sig.S < eddsa.ctx.suborder
    assert eddsa.verify(eddsa.public_key(sender_key), MESSAGE, sig)


def test_signing_is_deterministic(eddsa, sender_key):
    assert eddsa.sign(sender_key, MESSAGE) == eddsa.sign(sender_key, MESSAGE)
    assert eddsa.sign(sender_key, MESSAGE) != eddsa.sign(sender_key, MESSAGE + 1)


def test_verify_rejects_other_message_or_key(eddsa, sender_key, receiver_key):
    sig = eddsa.sign(sender_key, MESSAGE)
    assert not eddsa.verify(eddsa.public_key(sender_key), MESSAGE + 1, sig)
    assert not eddsa.verify(eddsa.public_key(receiver_key), MESSAGE, sig)


def test_verify_rejects_malformed_signatures(eddsa, sender_key):
    pub = eddsa.public_key(sender_key)
    sig = eddsa.sign(sender_key, MESSAGE)
    assert not eddsa.verify(pub, MESSAGE, Signature(sig.R8, sig.S + eddsa.ctx.suborder))
    assert not eddsa.verify(pub, MESSAGE, Signature((1, 2), sig.S))
    assert not eddsa.verify(pub, p, sig)


def test_sign_rejects_message_outside_field(eddsa, sender_key):
    with pytest.raises(OutOfDomain):
        eddsa.sign(sender_key, p)


def test_public_key_comes_from_sha512_expansion(eddsa, sender_key):
    digest = bytearray(hashlib.sha512(sender_key.seed).digest()[:32])
    digest[0] &= 0xF8
    digest[31] &= 0x7F
    digest[31] |= 0x40
    s = int.from_bytes(bytes(digest), "little")
    expected = eddsa.curve.multiply(eddsa.curve.base8, s >> 3)
    assert eddsa.public_key(sender_key) == (expected[0].n, expected[1].n)
