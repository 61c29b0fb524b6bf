#!/usr/bin/env python3
"""
Chaostego Command Line Interface

Hide and recover payloads in image carriers.

Usage:
    chaostego embed --carrier cover.png --output stego.png --message "hi"
    chaostego extract --carrier stego.png
    chaostego capacity --carrier cover.png
    chaostego --version
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import StegoConfig
from .crypto.engine import GCM_TAG_SIZE, CryptoError
from .crypto.envelope import MIN_ENVELOPE_SIZE
from .pipeline import StegoPipeline
from .stego.base import StegoError
from .stego.image import PixelCarrier

ENVELOPE_OVERHEAD = MIN_ENVELOPE_SIZE + GCM_TAG_SIZE


class StegoCLI:
    """Main CLI application."""

    def __init__(self, config: Optional[StegoConfig] = None):
        self.pipeline = StegoPipeline(config or StegoConfig.from_env())

    def run(self, args: List[str]) -> int:
        """Run the CLI with given arguments."""
        parser = self.create_parser()
        parsed = parser.parse_args(args)

        logging.basicConfig(
            level=logging.INFO if parsed.verbose else logging.WARNING,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        if not hasattr(parsed, "func"):
            parser.print_help()
            return 0

        try:
            return parsed.func(parsed)
        except (StegoError, CryptoError, OSError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    def create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog="chaostego",
            description="Chaotic LSB steganography for images",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
    chaostego embed --carrier cover.png --output stego.png --message "meet at noon"
    chaostego embed --carrier cover.png --output stego.png --file secret.pdf --password pw
    chaostego extract --carrier stego.png --password pw --output secret.pdf
    chaostego capacity --carrier cover.png
            """
        )

        parser.add_argument(
            "--version",
            action="version",
            version=f"chaostego v{__version__}"
        )
        parser.add_argument("--verbose", "-v", action="store_true", help="Log progress")

        subparsers = parser.add_subparsers(title="commands", dest="command")
        self.add_embed_command(subparsers)
        self.add_extract_command(subparsers)
        self.add_capacity_command(subparsers)

        return parser

    @staticmethod
    def _add_secret_arguments(cmd: argparse.ArgumentParser) -> None:
        cmd.add_argument("--password", "-p", help="Envelope password (default: built-in default)")
        cmd.add_argument("--seed", "-s", help="Shuffle seed (default: built-in default in secure mode)")
        cmd.add_argument("--insecure", action="store_true",
                         help="Skip the encryption envelope (default: CHAOSTEGO_SECURE)")

    def add_embed_command(self, subparsers) -> None:
        """Add embed command to parser."""
        cmd = subparsers.add_parser("embed", help="Hide a message or file in an image")
        cmd.add_argument("--carrier", "-c", required=True, help="Cover image")
        cmd.add_argument("--output", "-o", required=True, help="Output PNG")
        source = cmd.add_mutually_exclusive_group(required=True)
        source.add_argument("--message", "-m", help="Text message to hide")
        source.add_argument("--file", "-f", help="File to hide")
        cmd.add_argument("--no-compress", action="store_true",
                         help="Do not compress the payload (default: CHAOSTEGO_COMPRESS)")
        self._add_secret_arguments(cmd)
        cmd.set_defaults(func=self.handle_embed)

    def add_extract_command(self, subparsers) -> None:
        """Add extract command to parser."""
        cmd = subparsers.add_parser("extract", help="Recover a hidden payload")
        cmd.add_argument("--carrier", "-c", required=True, help="Stego image")
        cmd.add_argument("--output", "-o", help="Write the payload to this file")
        self._add_secret_arguments(cmd)
        cmd.set_defaults(func=self.handle_extract)

    def add_capacity_command(self, subparsers) -> None:
        """Add capacity command to parser."""
        cmd = subparsers.add_parser("capacity", help="Show how much an image can hold")
        cmd.add_argument("--carrier", "-c", required=True, help="Cover image")
        cmd.set_defaults(func=self.handle_capacity)

    def handle_embed(self, args) -> int:
        carrier = PixelCarrier.open(args.carrier)
        if args.file:
            data = Path(args.file).read_bytes()
        else:
            data = args.message

        stego = self.pipeline.hide_in_image(
            carrier,
            data,
            password=args.password,
            seed=args.seed,
            secure=False if args.insecure else None,
            compress=False if args.no_compress else None,
        )
        stego.save(args.output)
        print(f"Payload hidden in {args.output}")
        return 0

    def handle_extract(self, args) -> int:
        carrier = PixelCarrier.open(args.carrier)
        revealed = self.pipeline.reveal_from_image(
            carrier,
            password=args.password,
            seed=args.seed,
            secure=False if args.insecure else None,
        )

        if args.output:
            Path(args.output).write_bytes(revealed.data)
            print(f"Payload written to {args.output} ({len(revealed.data)} bytes)")
        elif revealed.is_text:
            print(revealed.text)
        else:
            print(f"Binary payload of {len(revealed.data)} bytes; use --output to save it")
        return 0

    def handle_capacity(self, args) -> int:
        carrier = PixelCarrier.open(args.carrier)
        capacity = self.pipeline.image_capacity(carrier)
        print(f"Image: {carrier.width}x{carrier.height}")
        print(f"Capacity: {capacity} bytes ({max(0, capacity - ENVELOPE_OVERHEAD)} bytes with encryption)")
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    cli = StegoCLI()
    return cli.run(sys.argv[1:] if argv is None else argv)


if __name__ == "__main__":
    sys.exit(main())
