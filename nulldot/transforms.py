"""Reversible per-character bit transforms.

A :class:`TransformPipeline` is an ordered tuple of steps over a fixed code
width. Encoding applies the steps in order; decoding applies each step's
inverse in reverse order, so both directions share one definition.
"""

import dataclasses
from typing import Dict, Tuple

from .errors import InvalidConfiguration


def rotate_left(value: int, amount: int, width: int) -> int:
    mask = (1 << width) - 1
    amount %= width
    value &= mask
    return ((value << amount) | (value >> (width - amount))) & mask


def rotate_right(value: int, amount: int, width: int) -> int:
    return rotate_left(value, width - (amount % width), width)


def swap_nibbles(value: int, width: int) -> int:
    # Swaps the two nibbles of every byte in the code.
    high = (value >> 4) & int("0F" * (width // 8), 16)
    low = value & int("0F" * (width // 8), 16)
    return (low << 4) | high


@dataclasses.dataclass(frozen=True)
class XorKeyByte:
    def forward(self, value: int, key_byte: int, width: int) -> int:
        return (value ^ key_byte) & ((1 << width) - 1)

    inverse = forward

    def check(self, width: int) -> None:
        pass


@dataclasses.dataclass(frozen=True)
class XorConstant:
    constant: int

    def forward(self, value: int, key_byte: int, width: int) -> int:
        return (value ^ self.constant) & ((1 << width) - 1)

    inverse = forward

    def check(self, width: int) -> None:
        if self.constant >> width:
            raise InvalidConfiguration(
                f"constant {self.constant:#x} does not fit in {width} bits"
            )


@dataclasses.dataclass(frozen=True)
class AddConstant:
    constant: int

    def forward(self, value: int, key_byte: int, width: int) -> int:
        return (value + self.constant) % (1 << width)

    def inverse(self, value: int, key_byte: int, width: int) -> int:
        return (value - self.constant) % (1 << width)

    def check(self, width: int) -> None:
        if self.constant >> width:
            raise InvalidConfiguration(
                f"constant {self.constant:#x} does not fit in {width} bits"
            )


@dataclasses.dataclass(frozen=True)
class RotateLeft:
    amount: int

    def forward(self, value: int, key_byte: int, width: int) -> int:
        return rotate_left(value, self.amount, width)

    def inverse(self, value: int, key_byte: int, width: int) -> int:
        return rotate_right(value, self.amount, width)

    def check(self, width: int) -> None:
        if not 0 < self.amount < width:
            raise InvalidConfiguration(
                f"rotation by {self.amount} is out of range for {width} bits"
            )


@dataclasses.dataclass(frozen=True)
class RotateRight(RotateLeft):
    def forward(self, value: int, key_byte: int, width: int) -> int:
        return rotate_right(value, self.amount, width)

    def inverse(self, value: int, key_byte: int, width: int) -> int:
        return rotate_left(value, self.amount, width)


@dataclasses.dataclass(frozen=True)
class SwapNibbles:
    def forward(self, value: int, key_byte: int, width: int) -> int:
        return swap_nibbles(value, width)

    inverse = forward

    def check(self, width: int) -> None:
        if width % 8:
            raise InvalidConfiguration(
                f"nibble swap needs a whole number of bytes, got {width} bits"
            )


@dataclasses.dataclass(frozen=True)
class TransformPipeline:
    width: int
    steps: Tuple[object, ...]

    def __post_init__(self) -> None:
        if self.width < 1:
            raise InvalidConfiguration(f"code width must be >= 1, got {self.width}")
        if not self.steps:
            raise InvalidConfiguration("a transform pipeline needs at least one step")
        for step in self.steps:
            step.check(self.width)

    @property
    def code_space(self) -> int:
        return 1 << self.width

    def forward(self, value: int, key_byte: int) -> int:
        value %= self.code_space
        for step in self.steps:
            value = step.forward(value, key_byte, self.width)
        return value

    def inverse(self, value: int, key_byte: int) -> int:
        value %= self.code_space
        for step in reversed(self.steps):
            value = step.inverse(value, key_byte, self.width)
        return value


VARIANTS: Dict[str, TransformPipeline] = {
    "classic": TransformPipeline(width=7, steps=(XorKeyByte(),)),
    "scrambled7": TransformPipeline(
        width=7,
        steps=(XorKeyByte(), RotateLeft(3), XorConstant(0x2A), RotateRight(1)),
    ),
    "wide": TransformPipeline(
        width=16,
        steps=(
            XorKeyByte(),
            RotateLeft(5),
            SwapNibbles(),
            AddConstant(0x1F2B),
            XorConstant(0xA5C3),
            RotateRight(3),
        ),
    ),
}
DEFAULT_VARIANT = "classic"


def get_variant(name: str) -> TransformPipeline:
    try:
        return VARIANTS[name]
    except KeyError:
        raise InvalidConfiguration(
            f"unknown transform variant {name!r}; expected one of: "
            + ", ".join(sorted(VARIANTS))
        ) from None


__all__ = [
    "DEFAULT_VARIANT",
    "VARIANTS",
    "AddConstant",
    "RotateLeft",
    "RotateRight",
    "SwapNibbles",
    "TransformPipeline",
    "XorConstant",
    "XorKeyByte",
    "get_variant",
    "rotate_left",
    "rotate_right",
    "swap_nibbles",
]
