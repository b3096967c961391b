"""Keyed, reversible two-glyph text obfuscation."""

from .codec import (
    CodecProfile,
    NulldotCodec,
    SymbolSet,
    decode,
    encode,
    load_profile,
    save_profile,
    stringify_data,
)
from .errors import InvalidConfiguration, InvalidLength, MalformedInput, NulldotError
from .sequence import generate_sequence
from .transforms import VARIANTS, TransformPipeline

__all__ = [
    "CodecProfile",
    "InvalidConfiguration",
    "InvalidLength",
    "MalformedInput",
    "NulldotCodec",
    "NulldotError",
    "SymbolSet",
    "TransformPipeline",
    "VARIANTS",
    "decode",
    "encode",
    "generate_sequence",
    "load_profile",
    "save_profile",
    "stringify_data",
]

__version__ = "0.1.0"
