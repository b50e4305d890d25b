"""Errors raised while building a transfer witness."""


class WitnessError(Exception):
    """Base class for every failure the witness pipeline reports."""


class MalformedAmount(WitnessError, ValueError):
    """Amount text that is not a non-negative integer."""


class InvalidTransfer(WitnessError):
    """Transfer that would push the sender balance below zero."""


class SignerMismatch(WitnessError):
    """Signing key does not belong to the sender account."""


class OutOfDomain(WitnessError, ValueError):
    """Value outside the field or curve the primitives are defined on."""
