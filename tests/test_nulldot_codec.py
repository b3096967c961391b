import json

import pytest

import nulldot
from nulldot import (
    CodecProfile,
    InvalidConfiguration,
    MalformedInput,
    NulldotCodec,
    generate_sequence,
    stringify_data,
)

KEY = "mySecretKey"


def test_hello_world_scenario() -> None:
    codec = NulldotCodec()
    encoded = codec.encode("Hello World!", KEY)
    assert set(encoded) <= {",", ".", "_"}
    assert codec.decode(encoded, KEY) == "Hello World!"


def test_wrong_key_garbles_without_failing() -> None:
    codec = NulldotCodec()
    encoded = codec.encode("Hello World!", KEY)
    garbled = codec.decode(encoded, "notTheKey")
    assert garbled != "Hello World!"
    assert len(garbled) == len("Hello World!")


def test_classic_codes_match_xor_with_sequence() -> None:
    codec = NulldotCodec()
    stream = generate_sequence(KEY, 2)
    expected = ""
    for c, k in zip("Hi", stream):
        bits = format((ord(c) ^ k) % 128, "07b")
        expected += bits.replace("0", ",").replace("1", ".") + "_"
    assert codec.encode("Hi", KEY) == expected


@pytest.mark.parametrize("variant", sorted(nulldot.VARIANTS))
@pytest.mark.parametrize(
    "text",
    [
        "Hello World!",
        "a",
        "The quick brown fox jumps over the lazy dog.",
        "~!@#$%^&*()_+{}|:<>?`-=[]\\;',./\"",
    ],
)
def test_round_trip(variant: str, text: str) -> None:
    codec = NulldotCodec(variant=variant)
    assert codec.decode(codec.encode(text, "round-trip-key"), "round-trip-key") == text


def test_wide_variant_round_trips_non_ascii() -> None:
    codec = NulldotCodec(variant="wide")
    text = "héllo wörld € ✓"
    assert codec.decode(codec.encode(text, KEY), KEY) == text


def test_empty_input() -> None:
    codec = NulldotCodec()
    assert codec.encode("", KEY) == ""
    assert codec.decode("", KEY) == ""


def test_encode_is_deterministic() -> None:
    codec = NulldotCodec(variant="scrambled7")
    assert codec.encode("repeatable", KEY) == codec.encode("repeatable", KEY)


def test_key_sensitivity() -> None:
    codec = NulldotCodec()
    assert codec.encode("sensitive text", "k1") != codec.encode("sensitive text", "k2")


def test_spaces_become_word_delimiter() -> None:
    codec = NulldotCodec(char_delimiter="|", word_delimiter="/")
    encoded = codec.encode("a b c", KEY)
    assert encoded.count("/") == 2
    assert encoded.count("|") == 3
    assert codec.decode(encoded, KEY) == "a b c"


@pytest.mark.parametrize("variant", sorted(nulldot.VARIANTS))
def test_codes_have_fixed_width(variant: str) -> None:
    codec = NulldotCodec(variant=variant)
    encoded = codec.encode("NoSpacesHere123", KEY)
    codes = [code for code in encoded.split("_") if code]
    assert len(codes) == len("NoSpacesHere123")
    assert all(len(code) == codec.width for code in codes)


def test_multi_character_symbols() -> None:
    codec = NulldotCodec(
        zero_symbol="<0>", one_symbol="<1>", char_delimiter="|", word_delimiter="//"
    )
    encoded = codec.encode("multi char symbols", KEY)
    assert codec.decode(encoded, KEY) == "multi char symbols"


def test_short_code_is_malformed() -> None:
    codec = NulldotCodec()
    with pytest.raises(MalformedInput, match="expected 7"):
        codec.decode(",,,,,,_", KEY)


def test_long_code_is_malformed() -> None:
    codec = NulldotCodec()
    encoded = codec.encode("ok", KEY)
    with pytest.raises(MalformedInput):
        codec.decode("," + encoded, KEY)


def test_unknown_glyph_is_malformed() -> None:
    codec = NulldotCodec()
    with pytest.raises(MalformedInput, match="unknown symbol"):
        codec.decode(",,x,,,,_", KEY)


def test_malformed_input_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        NulldotCodec().decode("..._", KEY)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"zero_symbol": ".", "one_symbol": "."},
        {"zero_symbol": ""},
        {"word_delimiter": ""},
        {"char_delimiter": "__"},
        {"zero_symbol": "_x"},
        {"one_symbol": "a", "char_delimiter": "ab", "word_delimiter": "cd"},
        {"zero_symbol": "0", "one_symbol": "00"},
        {"zero_symbol": "ab", "one_symbol": "a"},
        {"char_delimiter": "ab", "word_delimiter": "a"},
        {"zero_symbol": "xa", "one_symbol": "by", "char_delimiter": "ab"},
        {"zero_symbol": "ab", "one_symbol": "cd", "word_delimiter": "bc"},
        {"zero_symbol": "ab", "one_symbol": "cd", "char_delimiter": "|", "word_delimiter": "b|c"},
    ],
)
def test_invalid_symbols_rejected(kwargs) -> None:
    with pytest.raises(InvalidConfiguration):
        NulldotCodec(**kwargs)


def test_unknown_variant_rejected() -> None:
    with pytest.raises(InvalidConfiguration):
        NulldotCodec(variant="missing")


def test_stringify_data() -> None:
    assert stringify_data("plain text") == "plain text"
    assert stringify_data(42) == "42"
    assert stringify_data(1.5) == "1.5"
    assert stringify_data(True) == "true"
    assert stringify_data(None) == "null"
    assert stringify_data({"b": 1, "a": [True, None]}) == '{"a":[true,null],"b":1}'
    assert stringify_data((1, 2)) == "[1,2]"


def test_structured_data_round_trips_to_canonical_text() -> None:
    payload = {"user": "alice", "ids": [1, 2, 3]}
    encoded = nulldot.encode(payload, KEY)
    decoded = nulldot.decode(encoded, KEY)
    assert json.loads(decoded) == payload


def test_profile_round_trip(tmp_path) -> None:
    codec = NulldotCodec(zero_symbol="0", one_symbol="1", variant="wide")
    path = tmp_path / "profile.json"
    nulldot.save_profile(codec.profile(), path)
    loaded = nulldot.load_profile(path)
    assert loaded == codec.profile()
    restored = NulldotCodec.from_profile(loaded)
    assert restored.decode(codec.encode("profile test", KEY), KEY) == "profile test"


def test_profile_defaults_fill_missing_fields() -> None:
    profile = CodecProfile.from_dict({"variant": "scrambled7"})
    assert profile.variant == "scrambled7"
    assert profile.word_delimiter == "__"


def test_unsupported_profile_version() -> None:
    with pytest.raises(InvalidConfiguration, match="Unsupported codec profile version"):
        CodecProfile.from_dict({"version": "v99"})


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {"zero_symbol": "0", "one_symbol": "10"},
        {"zero_symbol": "<0>", "one_symbol": "<1>", "char_delimiter": "|", "word_delimiter": "//"},
        {"char_delimiter": "-", "word_delimiter": "--"},
    ],
)
def test_accepted_symbol_sets_round_trip(kwargs) -> None:
    codec = NulldotCodec(**kwargs)
    assert codec.decode(codec.encode("Hello World!", KEY), KEY) == "Hello World!"


@pytest.mark.parametrize("text", ["a  b", " leading", "trailing ", "two  gaps  here"])
def test_space_runs_follow_delimiter_splitting(text: str) -> None:
    # Each space is its own word delimiter and decode joins every group with
    # one space, so with the default delimiters these inputs come back as-is.
    codec = NulldotCodec()
    encoded = codec.encode(text, KEY)
    assert encoded.count("__") >= text.count(" ")
    assert codec.decode(encoded, KEY) == text
