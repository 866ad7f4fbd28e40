#!/usr/bin/env python3
"""
Rotary CLI - Command-line interface for the rotor engine.

Usage:
    rotary keygen [-o OUTPUT] [--name NAME] [--prefix-length N]
    rotary encode <file> -k SECRET [-o OUTPUT] [--mode MODE] [--raw]
    rotary decode <file> -k SECRET [-o OUTPUT] [--mode MODE] [--raw]
    rotary inspect <secret>

Examples:
    # Create a secret
    rotary keygen -o notes.secret.json --name notes

    # Encode a file
    rotary encode notes.txt -k notes.secret.json -o notes.rot

    # Decode a file
    rotary decode notes.rot -k notes.secret.json -o notes.txt

Defaults come from ROTARY_* environment variables (see rotary.config).
"""

import argparse
import logging
import os
import sys
from typing import Optional

from pydantic import ValidationError

from rotary import __version__
from rotary.config import load_settings
from rotary.engine import Engine
from rotary.errors import RotaryError
from rotary.framing import Mode
from rotary.secret import Secret

logger = logging.getLogger(__name__)

ENCODED_SUFFIX = ".rot"


def load_secret(path: Optional[str]) -> Secret:
    """Load the secret named on the command line or in ROTARY_SECRET_PATH."""
    path = path or load_settings().secret_path
    if not path:
        raise RotaryError("No secret given (use -k or set ROTARY_SECRET_PATH)")
    return Secret.load(path)


def build_engine(args: argparse.Namespace) -> Engine:
    secret = load_secret(args.secret)
    return Engine(secret, Mode.parse(args.mode), tagged=not args.raw)


def cmd_keygen(args: argparse.Namespace) -> int:
    """Generate a secret."""
    secret = Secret.create(args.name, args.prefix_length)

    if args.output:
        secret.save(args.output)
        print(f"Secret written: {args.output}")
    else:
        print(secret.to_record().model_dump_json(indent=2))
    return 0


def cmd_encode(args: argparse.Namespace) -> int:
    """Encode a file."""
    if not os.path.exists(args.file):
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        return 1

    output = args.output or args.file + ENCODED_SUFFIX

    try:
        engine = build_engine(args)
        with open(args.file, "rb") as fin:
            encoded = engine.encode(fin.read())
        with open(output, "wb") as fout:
            fout.write(encoded)
        print(f"Encoded: {args.file} -> {output}")
        return 0
    except (RotaryError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_decode(args: argparse.Namespace) -> int:
    """Decode a file."""
    if not os.path.exists(args.file):
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        return 1

    # Determine output filename
    if args.output:
        output = args.output
    elif args.file.endswith(ENCODED_SUFFIX):
        output = args.file[: -len(ENCODED_SUFFIX)]
    else:
        output = args.file + ".dec"

    try:
        engine = build_engine(args)
        with open(args.file, "rb") as fin:
            decoded = engine.decode(fin.read())
        with open(output, "wb") as fout:
            fout.write(decoded)
        print(f"Decoded: {args.file} -> {output}")
        return 0
    except (RotaryError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_inspect(args: argparse.Namespace) -> int:
    """Describe a secret without printing its tables."""
    try:
        secret = Secret.load(args.secret)
    except (RotaryError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Name: {secret.name or '(unnamed)'}")
    print(f"Prefix length: {secret.prefix_length}")
    for i, rotor in enumerate(secret.rotors):
        noise = "noisey" if rotor.is_noisey() else "quiet"
        print(f"Rotor {i}: distance={rotor.rotation_distance} {noise}")
    return 0


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    try:
        settings = load_settings()
    except ValidationError as e:
        print(f"Error: Invalid ROTARY_* setting - {e}", file=sys.stderr)
        return 1

    parser = argparse.ArgumentParser(
        prog="rotary",
        description="Rotary - rotor byte substitution engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"rotary-cipher {__version__}"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # keygen command
    keygen_parser = subparsers.add_parser("keygen", help="Generate a secret")
    keygen_parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    keygen_parser.add_argument("--name", default="", help="Secret label")
    keygen_parser.add_argument(
        "--prefix-length", type=int, default=settings.prefix_length,
        help="Noise bytes before each stream",
    )

    # encode/decode commands
    for name, help_text in (("encode", "Encode a file"), ("decode", "Decode a file")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("file", help=f"File to {name}")
        sub.add_argument("-k", "--secret", default=settings.secret_path, help="Secret file")
        sub.add_argument("-o", "--output", help="Output file")
        sub.add_argument(
            "--mode", choices=["deep", "shallow"], default=settings.mode,
            help="Transformation mode",
        )
        sub.add_argument(
            "--raw", action="store_true", default=not settings.tagged,
            help="No version/mode header",
        )

    # inspect command
    inspect_parser = subparsers.add_parser("inspect", help="Describe a secret")
    inspect_parser.add_argument("secret", help="Secret file")

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else settings.log_level)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "keygen" and args.prefix_length < 0:
        print("Error: Prefix length must be non-negative", file=sys.stderr)
        return 1

    commands = {
        "keygen": cmd_keygen,
        "encode": cmd_encode,
        "decode": cmd_decode,
        "inspect": cmd_inspect,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
