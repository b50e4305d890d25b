import pytest

from zktransfer import CryptoContext, EdDSA, Mimc7, PrivateKey, WitnessAssembler


@pytest.fixture(scope="session")
def ctx():
    return CryptoContext.default()


@pytest.fixture(scope="session")
def hasher(ctx):
    return Mimc7(ctx)


@pytest.fixture(scope="session")
def eddsa(ctx, hasher):
    return EdDSA(ctx, hasher)


@pytest.fixture(scope="session")
def sender_key():
    return PrivateKey.from_hex("1")


@pytest.fixture(scope="session")
def receiver_key():
    return PrivateKey.from_hex("2")


@pytest.fixture(scope="session")
def assembler(ctx, hasher):
    return WitnessAssembler(ctx, hasher)


@pytest.fixture(scope="session")
def witness(assembler, sender_key, receiver_key):
    # 500 -> 350 / 0 -> 150
    return assembler.transfer(sender_key, receiver_key, 500, 0, lambda: 150)
