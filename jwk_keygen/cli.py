"""Generate public/private key pairs in JWK format.

Usage:
    jwk-keygen --use sig --alg ES256
    jwk-keygen --use enc --alg RSA-OAEP --bits 4096 --kid-rand --jwks
    jwk-keygen --use sig --alg EdDSA --kid signing-1 --format --out-dir keys

Without a key id the documents are printed; with --kid or --kid-rand they are
written to new files (public 0444, private 0400). Existing files are never
overwritten.
"""

import argparse
import copy
import logging
import sys

from pydantic import ValidationError

from jwk_keygen.config import VERSION, get_settings
from jwk_keygen.errors import InvalidGeneratedKey, KeygenError, OutputError
from jwk_keygen.keys.policy import ALL_ALGORITHMS
from jwk_keygen.schemas import KeygenRequest
from jwk_keygen.service import run

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jwk-keygen",
        description="A command-line utility to generate public/private keypairs in JWK format.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("--use", required=True, choices=["enc", "sig"], help="Desired key use")
    parser.add_argument(
        "--alg", required=True, choices=ALL_ALGORITHMS, metavar="ALG",
        help=f"Generate key to be used for ALG ({', '.join(ALL_ALGORITHMS)})",
    )
    parser.add_argument("--bits", type=int, default=0, help="Key size in bits (0 = algorithm default)")
    kid_group = parser.add_mutually_exclusive_group()
    kid_group.add_argument("--kid", help="Key ID")
    kid_group.add_argument("--kid-rand", action="store_true", help="Generate random Key ID")
    parser.add_argument("--jwks", action="store_true", help="Generate as JWKS too")
    parser.add_argument("--format", action="store_true", help="Format JSON")
    parser.add_argument("--out-dir", default=None, help="Directory for key files (default: $JWK_KEYGEN_OUTPUT_DIR or .)")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)
    if args.out_dir is not None:
        settings = copy.copy(settings)
        settings.OUTPUT_DIR = args.out_dir

    try:
        request = KeygenRequest(
            use=args.use,
            alg=args.alg,
            bits=args.bits,
            kid=args.kid,
            kid_rand=args.kid_rand,
            jwks=args.jwks,
            format=args.format,
        )
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        parser.error(messages)

    try:
        run(request, settings=settings)
    except InvalidGeneratedKey as e:
        logger.critical("Generated key failed consistency checks: %s", e)
        print(f"[ERROR] invalid keys were generated: {e}", file=sys.stderr)
        return 1
    except (OutputError, OSError) as e:
        print(f"[ERROR] can't write key file: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        print(f"[ERROR] invalid key request: {messages}", file=sys.stderr)
        return 1
    except KeygenError as e:
        print(f"[ERROR] unable to generate key: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
