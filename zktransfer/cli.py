"""Command line front end.

    python -m zktransfer witness [--amount N] [--out input.json]
    python -m zktransfer keys
    python -m zktransfer check input.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from .account import commit
from .eddsa import EdDSA, PrivateKey
from .errors import WitnessError
from .field import CryptoContext
from .witness import WitnessAssembler, parse_amount, verify_inputs

logger = logging.getLogger(__name__)

SENDER_BALANCE = 500
RECEIVER_BALANCE = 0
SENDER_SEED = "1"
RECEIVER_SEED = "2"


def prompt_amount(read: Callable[[str], str] = input) -> int:
    return parse_amount(read("Amount of money to transfer:"))


def amount_source(args: argparse.Namespace, read: Callable[[str], str]) -> Callable[[], int]:
    if args.amount is not None:
        return lambda: parse_amount(args.amount)
    return lambda: prompt_amount(read)


def cmd_witness(args: argparse.Namespace, read: Callable[[str], str] = input) -> int:
    ctx = CryptoContext.default()
    assembler = WitnessAssembler(ctx)
    sender_key = PrivateKey.from_hex(args.sender_key)
    receiver_key = PrivateKey.from_hex(args.receiver_key)

    print("Sender balance: ", args.sender_balance)
    print("Receiver balance: ", args.receiver_balance)

    witness = assembler.transfer(
        sender_key,
        receiver_key,
        args.sender_balance,
        args.receiver_balance,
        amount_source(args, read),
    )

    print("------------------- Sender and receiver hash -------------------")
    print(commit(assembler.hasher, witness.sender))
    print(commit(assembler.hasher, witness.receiver))

    verified = assembler.eddsa.verify(
        witness.sender.public_key, witness.tx_hash, witness.signature
    )
    print("Signature verified:", verified)

    print("------------------- new root hash -------------------")
    print(witness.new_root)

    out = Path(args.out)
    out.write_text(witness.to_json(), encoding="utf-8")
    logger.info("witness written to %s", out)
    return 0


def cmd_keys(args: argparse.Namespace) -> int:
    eddsa = EdDSA(CryptoContext.default())
    for label, text in (("Sender", args.sender_key), ("Receiver", args.receiver_key)):
        key = PrivateKey.from_hex(text)
        x, y = eddsa.public_key(key)
        print(f"{label} private key: {key.seed.hex()}")
        print(f"{label} public key: [{x}, {y}]")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    try:
        inputs = json.loads(Path(args.path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        print(f"error: cannot read {args.path}: {exc}", file=sys.stderr)
        return 1
    if not isinstance(inputs, dict):
        print(f"error: {args.path} does not hold a witness record", file=sys.stderr)
        return 1
    failures = verify_inputs(CryptoContext.default(), inputs)
    if failures:
        print("witness check failed: " + ", ".join(failures), file=sys.stderr)
        return 1
    print("witness OK")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zktransfer",
        description="Build witness inputs for the private transfer circuit.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_keys(p: argparse.ArgumentParser) -> None:
        p.add_argument("--sender-key", default=SENDER_SEED, help="sender seed, hex (default: 00..01)")
        p.add_argument("--receiver-key", default=RECEIVER_SEED, help="receiver seed, hex (default: 00..02)")

    w = sub.add_parser("witness", help="build input.json for a transfer")
    add_keys(w)
    w.add_argument("--sender-balance", type=int, default=SENDER_BALANCE)
    w.add_argument("--receiver-balance", type=int, default=RECEIVER_BALANCE)
    w.add_argument("--amount", help="amount to transfer; prompted for when omitted")
    w.add_argument("--out", default="input.json", help="output file (default: input.json)")
    w.set_defaults(func=cmd_witness)

    k = sub.add_parser("keys", help="print the public keys derived from the seeds")
    add_keys(k)
    k.set_defaults(func=cmd_keys)

    c = sub.add_parser("check", help="re-verify a written witness")
    c.add_argument("path")
    c.set_defaults(func=cmd_check)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except WitnessError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
