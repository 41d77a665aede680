import base64

import mmh3
import pytest

from favhash.errors import EmptyInputError
from favhash.utils import fingerprint, to_int32


def test_known_vector_single_zero_byte():
    """base64(b'\\x00') == 'AA=='，MMH3 x86_32(seed=0) = 3330655679 → -964311617"""
    assert base64.b64encode(b"\x00") == b"AA=="
    assert fingerprint(b"\x00") == -964311617


def test_positive_digest_is_unchanged():
    # base64(b"hello") == "aGVsbG8="
    assert fingerprint(b"hello") == 650506236


def test_empty_input_rejected():
    with pytest.raises(EmptyInputError):
        fingerprint(b"")
    with pytest.raises(EmptyInputError):
        fingerprint(bytearray())


def test_hashes_base64_text_not_raw_bytes():
    data = b"\x89PNG\r\n\x1a\n"
    assert fingerprint(data) == mmh3.hash(base64.b64encode(data))
    assert fingerprint(data) != mmh3.hash(data)


def test_no_line_wrapping_for_large_input():
    data = bytes(range(256)) * 8
    expected = mmh3.hash(base64.b64encode(data), 0, False)
    assert b"\n" not in base64.b64encode(data)
    assert fingerprint(data) == to_int32(expected)


def test_deterministic():
    data = b"favicon-bytes" * 10
    assert fingerprint(data) == fingerprint(bytes(data))


def test_to_int32_twos_complement():
    assert to_int32(0) == 0
    assert to_int32(2**31 - 1) == 2**31 - 1
    assert to_int32(2**31) == -(2**31)
    assert to_int32(2**32 - 1) == -1
    assert to_int32(3330655679) == 3330655679 - 2**32


def test_fingerprint_matches_signed_reinterpretation():
    for data in (b"\x00", b"a", b"\xff" * 33, b"GIF89a"):
        d = mmh3.hash(base64.b64encode(data), 0, False)
        expected = d if d < 2**31 else d - 2**32
        assert fingerprint(data) == expected
