import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from .codec import CodecProfile, NulldotCodec, load_profile, save_profile
from .transforms import VARIANTS

KEY_ENV_VAR = "NULLDOT_KEY"


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8", errors="surrogatepass") as f:
        return f.read()


def _write_text(path: str, text: str) -> None:
    if path == "-":
        sys.stdout.write(text)
        sys.stdout.flush()
    else:
        # Wide codes decoded with the wrong key can yield lone surrogates
        with open(path, "w", encoding="utf-8", errors="surrogatepass") as f:
            f.write(text)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Keyed two-glyph text codec")
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--input", default="-", help="Input path, or - for stdin")
    common.add_argument("--output", default="-", help="Output path, or - for stdout")
    common.add_argument("--key", help=f"Secret key (falls back to ${KEY_ENV_VAR})")
    common.add_argument("--key-file", help="Read the secret key from this file")
    common.add_argument(
        "--profile",
        help="Path to a codec profile (loads existing values and writes updates)",
    )
    common.add_argument("--variant", choices=sorted(VARIANTS))
    common.add_argument("--zero-symbol")
    common.add_argument("--one-symbol")
    common.add_argument("--char-delimiter")
    common.add_argument("--word-delimiter")
    common.add_argument("--verbose", action="store_true")

    enc = subparsers.add_parser("encode", parents=[common])
    enc.add_argument(
        "--json",
        action="store_true",
        help="Parse the input as JSON and encode its canonical form",
    )

    subparsers.add_parser("decode", parents=[common])

    return parser


def resolve_key(args) -> str:
    if args.key is not None:
        return args.key
    if args.key_file is not None:
        # Keys are read verbatim except for the trailing newline editors add
        return _read_text(args.key_file).rstrip("\r\n")
    key = os.environ.get(KEY_ENV_VAR)
    if key is None:
        raise ValueError(f"a key is required via --key, --key-file or ${KEY_ENV_VAR}")
    return key


def resolve_profile(args) -> CodecProfile:
    profile = (
        load_profile(args.profile)
        if args.profile is not None and os.path.exists(args.profile)
        else CodecProfile()
    )
    for field in ("variant", "zero_symbol", "one_symbol", "char_delimiter", "word_delimiter"):
        value = getattr(args, field)
        if value is not None:
            setattr(profile, field, value)
    return profile


def _save_profile(args, codec: NulldotCodec) -> None:
    if args.profile is not None:
        save_profile(codec.profile(), args.profile)


def run_encode(args) -> None:
    key = resolve_key(args)
    codec = NulldotCodec.from_profile(resolve_profile(args))
    text = _read_text(args.input)
    data = json.loads(text) if args.json else text
    encoded = codec.encode(data, key)
    _save_profile(args, codec)
    _write_text(args.output, encoded)


def run_decode(args) -> None:
    key = resolve_key(args)
    codec = NulldotCodec.from_profile(resolve_profile(args))
    encoded = _read_text(args.input).rstrip("\r\n")
    decoded = codec.decode(encoded, key)
    _save_profile(args, codec)
    _write_text(args.output, decoded)


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.verbose and not logging.getLogger().handlers:
        logging.basicConfig(level=logging.DEBUG)

    try:
        if args.command == "encode":
            run_encode(args)
        elif args.command == "decode":
            run_decode(args)
        else:
            parser.error("Unknown command")
    except ValueError as exc:
        parser.error(str(exc))


__all__ = ["build_arg_parser", "resolve_key", "resolve_profile", "run_encode", "run_decode", "main"]
