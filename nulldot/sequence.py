"""Keyed pseudo-random byte sequences.

The generator state is a single unbounded integer seeded from a SHA-512
expansion of the key and advanced once per output byte by a fixed round
function: rotations inside a 512-bit word, a half swap, an XOR with one of a
fixed list of large primes and a "lattice" fold of multiply-add steps reduced
modulo the widest prime.

Nothing here is a cryptographic primitive. The only guarantee is that the
output is a pure function of ``(key, length)`` and that shorter requests are
prefixes of longer ones for the same key.
"""

import hashlib
import logging
from typing import Tuple

from .errors import InvalidLength

logger = logging.getLogger(__name__)

WORD_BITS = 512
WORD_MASK = (1 << WORD_BITS) - 1
ROTATE_RIGHT_BITS = 13
ROTATE_LEFT_BITS = 7
SEED_ROUNDS = 8
ROUNDS_PER_BYTE = 4

# Well known primes, ordered by width.
PRIMES: Tuple[int, ...] = (
    2**127 - 1,
    2**255 - 19,
    2**256 - 2**32 - 977,
    2**256 - 2**224 + 2**192 + 2**96 - 1,
    2**384 - 2**128 - 2**96 + 2**32 - 1,
    2**448 - 2**224 - 1,
    2**521 - 1,
)
MAX_PRIME = max(PRIMES)

# (multiplier, additive prime) pairs folded in order.
LATTICE: Tuple[Tuple[int, int], ...] = (
    (
        int(
            "6364136223846793005636413622384679300563641362238467930056364136"
            "2238467930056364136223846793005636413622384679300563641362238467"
            "9300563641362238467930056364136223846793005636413622384679300563"
            "64136223846793005"
        ),
        PRIMES[1],
    ),
    (
        int(
            "1442696364136223846793005636413622384679300563641362238467930056"
            "3641362238467930055040636413622384679300563641362238467930056364"
            "1362238467930056364136223846793005636413622384679300563641362238"
            "4679300588896340763641362238467930058889634076364136223846793005"
        ),
        PRIMES[3],
    ),
    (0x9E3779B97F4A7C15F39CC0605CEDC8341082276BF3A27251F86C6A11D0C18E95, PRIMES[5]),
    (6364136223846793005, PRIMES[2]),
)


def _rotate_right(value: int, amount: int, width: int = WORD_BITS) -> int:
    mask = (1 << width) - 1
    value &= mask
    amount %= width
    return ((value >> amount) | (value << (width - amount))) & mask


def _rotate_left(value: int, amount: int, width: int = WORD_BITS) -> int:
    return _rotate_right(value, width - (amount % width), width)


def _half_swap(value: int, width: int = WORD_BITS) -> int:
    return _rotate_right(value, width // 2, width)


def _lattice_fold(value: int) -> int:
    for multiplier, prime in LATTICE:
        value = (value * multiplier + prime) % MAX_PRIME
    return value


def mix_round(state: int, index: int) -> int:
    """Apply one round of the mixing function.

    ``index`` selects the prime XORed into the state and cycles over
    :data:`PRIMES`.
    """
    state = _rotate_right(state, ROTATE_RIGHT_BITS)
    state = _half_swap(state)
    state = _rotate_left(state, ROTATE_LEFT_BITS)
    state ^= PRIMES[index % len(PRIMES)]
    return _lattice_fold(state)


def _sha512_hex(text: str) -> str:
    return hashlib.sha512(text.encode("utf-8")).hexdigest()


def rehash_key(key: str) -> int:
    """Second-order digest of ``key``, folded into the state before each byte."""
    return int(_sha512_hex(_sha512_hex(key)), 16)


def derive_seed(key: str) -> int:
    # Three copies of the digest give 1536 bits of seed material.
    state = int(_sha512_hex(key) * 3, 16)
    for index in range(SEED_ROUNDS):
        state = mix_round(state, index)
    return state


def generate_sequence(key: str, length: int) -> bytes:
    """Return ``length`` bytes derived deterministically from ``key``."""
    if length < 0:
        raise InvalidLength(f"length must be >= 0, got {length}")
    logger.debug("Generating %d keyed bytes", length)
    if length == 0:
        return b""

    state = derive_seed(key)
    rehashed = rehash_key(key)
    out = bytearray(length)
    for position in range(length):
        state ^= rehashed
        for sub_round in range(ROUNDS_PER_BYTE):
            state = mix_round(state, position * ROUNDS_PER_BYTE + sub_round)
        out[position] = state % 256
    return bytes(out)


__all__ = [
    "LATTICE",
    "MAX_PRIME",
    "PRIMES",
    "WORD_BITS",
    "derive_seed",
    "generate_sequence",
    "mix_round",
    "rehash_key",
]
