"""CLI shim for running the codec directly from the repository checkout."""

from nulldot.cli import main
from nulldot.codec import NulldotCodec, decode, encode

__all__ = ["NulldotCodec", "decode", "encode", "main"]


if __name__ == "__main__":
    main()
