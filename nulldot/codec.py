import dataclasses
import json
import logging
from typing import Any, List, Optional, Tuple

from .errors import InvalidConfiguration, MalformedInput
from .sequence import generate_sequence
from .transforms import DEFAULT_VARIANT, TransformPipeline, get_variant

logger = logging.getLogger(__name__)

PROFILE_VERSION = "v1"


def _occurs_in_run(
    needle: str, tokens: Tuple[str, ...], no_repeat: Optional[str] = None
) -> bool:
    """Whether ``needle`` can appear inside some concatenation of ``tokens``.

    ``no_repeat`` names a token that never follows itself, which holds for the
    char delimiter since every code has at least one glyph.
    """

    def continues(remaining: str, previous: str) -> bool:
        for token in tokens:
            if token == no_repeat and previous == no_repeat:
                continue
            if token.startswith(remaining):
                return True
            if remaining.startswith(token) and continues(remaining[len(token):], token):
                return True
        return False

    for token in tokens:
        for offset in range(len(token)):
            tail = token[offset:]
            if tail.startswith(needle):
                return True
            if needle.startswith(tail) and continues(needle[len(tail):], token):
                return True
    return False


@dataclasses.dataclass(frozen=True)
class SymbolSet:
    zero_symbol: str = ","
    one_symbol: str = "."
    char_delimiter: str = "_"
    word_delimiter: str = "__"

    def __post_init__(self) -> None:
        symbols = dataclasses.asdict(self)
        for name, value in symbols.items():
            if not isinstance(value, str) or not value:
                raise InvalidConfiguration(f"{name} must be a non-empty string")
        if len(set(symbols.values())) != len(symbols):
            raise InvalidConfiguration(f"symbols must be pairwise distinct: {symbols}")
        if self.zero_symbol.startswith(self.one_symbol) or self.one_symbol.startswith(
            self.zero_symbol
        ):
            raise InvalidConfiguration(
                f"glyph {self.zero_symbol!r} and {self.one_symbol!r} share a prefix"
            )
        # Glyphs and delimiters must not overlap, otherwise splitting is ambiguous
        for glyph in (self.zero_symbol, self.one_symbol):
            for delimiter in (self.char_delimiter, self.word_delimiter):
                if glyph in delimiter or delimiter in glyph:
                    raise InvalidConfiguration(
                        f"glyph {glyph!r} overlaps delimiter {delimiter!r}"
                    )
        glyphs = (self.zero_symbol, self.one_symbol)
        if _occurs_in_run(self.char_delimiter, glyphs):
            raise InvalidConfiguration(
                f"char_delimiter {self.char_delimiter!r} can occur inside a code"
            )
        tokens = glyphs + (self.char_delimiter,)
        if _occurs_in_run(self.word_delimiter, tokens, no_repeat=self.char_delimiter):
            raise InvalidConfiguration(
                f"word_delimiter {self.word_delimiter!r} can occur inside a run of codes"
            )


@dataclasses.dataclass
class CodecProfile:
    """Non-secret codec settings that must match between encode and decode."""

    variant: str = DEFAULT_VARIANT
    zero_symbol: str = ","
    one_symbol: str = "."
    char_delimiter: str = "_"
    word_delimiter: str = "__"
    version: str = PROFILE_VERSION

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "variant": self.variant,
            "zero_symbol": self.zero_symbol,
            "one_symbol": self.one_symbol,
            "char_delimiter": self.char_delimiter,
            "word_delimiter": self.word_delimiter,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CodecProfile":
        version = data.get("version", PROFILE_VERSION)
        if version != PROFILE_VERSION:
            raise InvalidConfiguration(f"Unsupported codec profile version: {version}")
        defaults = cls()
        return cls(
            variant=data.get("variant", defaults.variant),
            zero_symbol=data.get("zero_symbol", defaults.zero_symbol),
            one_symbol=data.get("one_symbol", defaults.one_symbol),
            char_delimiter=data.get("char_delimiter", defaults.char_delimiter),
            word_delimiter=data.get("word_delimiter", defaults.word_delimiter),
            version=version,
        )


def save_profile(profile: CodecProfile, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(profile.to_dict(), f, indent=2)
        f.write("\n")
    logger.debug("Saved codec profile to %s", path)


def load_profile(path: str) -> CodecProfile:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    logger.debug("Loaded codec profile from %s", path)
    return CodecProfile.from_dict(raw)


def stringify_data(data: Any) -> str:
    """Canonical text form of ``data``.

    Strings pass through; JSON-shaped values (containers, booleans and
    ``None``) use compact JSON with sorted keys; anything else uses ``str``.
    """
    if isinstance(data, str):
        return data
    if data is None or isinstance(data, (bool, dict, list, tuple)):
        return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return str(data)


class NulldotCodec:
    """Keyed two-glyph text codec.

    Every non-space character becomes a fixed-width code written with the
    zero and one glyphs and terminated by the character delimiter; every
    space becomes the word delimiter. The key only lives for the duration
    of a single :meth:`encode` or :meth:`decode` call.
    """

    def __init__(
        self,
        zero_symbol: str = ",",
        one_symbol: str = ".",
        char_delimiter: str = "_",
        word_delimiter: str = "__",
        variant: str = DEFAULT_VARIANT,
    ) -> None:
        self.symbols = SymbolSet(zero_symbol, one_symbol, char_delimiter, word_delimiter)
        self.variant = variant
        self.pipeline: TransformPipeline = get_variant(variant)

    @classmethod
    def from_profile(cls, profile: CodecProfile) -> "NulldotCodec":
        return cls(
            zero_symbol=profile.zero_symbol,
            one_symbol=profile.one_symbol,
            char_delimiter=profile.char_delimiter,
            word_delimiter=profile.word_delimiter,
            variant=profile.variant,
        )

    def profile(self) -> CodecProfile:
        return CodecProfile(variant=self.variant, **dataclasses.asdict(self.symbols))

    @property
    def width(self) -> int:
        return self.pipeline.width

    def _render(self, value: int) -> str:
        bits = format(value, f"0{self.width}b")
        glyphs = [self.symbols.one_symbol if b == "1" else self.symbols.zero_symbol for b in bits]
        return "".join(glyphs) + self.symbols.char_delimiter

    def _parse(self, code: str, index: int) -> int:
        # Glyphs are prefix-free, so at most one can match at any offset
        glyphs = [(self.symbols.zero_symbol, "0"), (self.symbols.one_symbol, "1")]
        bits: List[str] = []
        pos = 0
        while pos < len(code):
            for glyph, bit in glyphs:
                if code.startswith(glyph, pos):
                    bits.append(bit)
                    pos += len(glyph)
                    break
            else:
                raise MalformedInput(
                    f"code {index} contains an unknown symbol at offset {pos}: {code!r}"
                )
        if len(bits) != self.width:
            raise MalformedInput(
                f"code {index} has {len(bits)} bits, expected {self.width}: {code!r}"
            )
        return int("".join(bits), 2)

    def encode(self, data: Any, key: str) -> str:
        text = stringify_data(data)
        count = sum(1 for c in text if c != " ")
        stream = generate_sequence(key, count)
        logger.debug("Encoding %d characters with variant %s", count, self.variant)

        tokens: List[str] = []
        key_index = 0
        for c in text:
            if c == " ":
                tokens.append(self.symbols.word_delimiter)
                continue
            value = self.pipeline.forward(ord(c), stream[key_index])
            key_index += 1
            tokens.append(self._render(value))
        return "".join(tokens)

    def _split(self, encoded: str) -> List[List[str]]:
        groups = []
        for word in encoded.split(self.symbols.word_delimiter):
            groups.append([code for code in word.split(self.symbols.char_delimiter) if code])
        return groups

    def decode(self, encoded: str, key: str) -> str:
        groups = self._split(encoded)
        # Parse everything up front so a malformed code fails before any output
        values = []
        index = 0
        for codes in groups:
            parsed = []
            for code in codes:
                parsed.append(self._parse(code, index))
                index += 1
            values.append(parsed)

        count = max(index, encoded.count(self.symbols.char_delimiter))
        stream = generate_sequence(key, count)
        logger.debug("Decoding %d codes with variant %s", index, self.variant)

        words = []
        key_index = 0
        for parsed in values:
            chars = []
            for value in parsed:
                chars.append(chr(self.pipeline.inverse(value, stream[key_index])))
                key_index += 1
            words.append("".join(chars))
        return " ".join(words)


def encode(data: Any, key: str, **options: Any) -> str:
    return NulldotCodec(**options).encode(data, key)


def decode(encoded: str, key: str, **options: Any) -> str:
    return NulldotCodec(**options).decode(encoded, key)


__all__ = [
    "CodecProfile",
    "NulldotCodec",
    "PROFILE_VERSION",
    "SymbolSet",
    "decode",
    "encode",
    "load_profile",
    "save_profile",
    "stringify_data",
]
