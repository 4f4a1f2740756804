import pytest

from otpkit import hotp
from otpkit.errors import AlgorithmUnavailable, InvalidCounter, InvalidParameter
from otpkit.params import MAX_COUNTER, Algorithm, OtpParameters, OtpType, Secret

from conftest import DEMO_HOTP_URI, RFC_SHA1_KEY

# RFC 4226 Appendix D, counters 0..9
RFC4226_CODES = [
    "755224", "287082", "359152", "969429", "338314",
    "254676", "287922", "162583", "399871", "520489",
]


def test_int_to_bytes_is_8_byte_big_endian():
    assert hotp.int_to_bytes(1) == b"\x00\x00\x00\x00\x00\x00\x00\x01"
    assert hotp.int_to_bytes(0x0102030405060708) == bytes(range(1, 9))
    assert hotp.int_to_bytes(MAX_COUNTER) == b"\xff" * 8


def test_dynamic_truncate_rfc4226_section_5_4():
    digest = bytes.fromhex("1f8698690e02ca16618550ef7f19da8e945b555a")
    assert hotp.dynamic_truncate(digest) == 0x50EF7F19
    assert hotp.dynamic_truncate(digest) % 10 ** 6 == 872921


def test_dynamic_truncate_clears_sign_bit():
    # offset 0, first byte 0xcc -> 0x4c
    digest = bytes.fromhex("cc93cf18508d94934c64b65d8ba7667fb7cde4b0")
    assert hotp.dynamic_truncate(digest) == 1284755224


@pytest.mark.parametrize("counter, expected", list(enumerate(RFC4226_CODES)))
def test_rfc4226_vectors(rfc4226_params, counter, expected):
    assert hotp.generate(rfc4226_params, counter) == expected


def test_generate_is_deterministic(hotp_params):
    assert hotp.generate(hotp_params, 1) == hotp.generate(hotp_params, 1)


@pytest.mark.parametrize("digits", [6, 7, 8])
def test_code_length_matches_digits(hotp_params, digits):
    params = hotp_params.replace(digits=digits)
    for counter in range(50):
        code = hotp.generate(params, counter)
        assert len(code) == digits
        assert code.isdigit()


def test_leading_zeros_are_kept():
    # RFC 6238 Appendix B, SHA1 at T=1111111109 -> counter 37037036
    params = OtpParameters(type=OtpType.HOTP, label="x", secret=Secret(RFC_SHA1_KEY), digits=8)
    assert hotp.generate(params, 37037036) == "07081804"


def test_algorithm_changes_code(rfc4226_params):
    codes = {hotp.generate(rfc4226_params.replace(algorithm=a), 0) for a in Algorithm}
    assert len(codes) == 3


@pytest.mark.parametrize("counter", [-1, MAX_COUNTER + 1, 1.0, None, True])
def test_invalid_counter(hotp_params, counter):
    with pytest.raises(InvalidCounter):
        hotp.generate(hotp_params, counter)


def test_max_counter_is_accepted(hotp_params):
    assert len(hotp.generate(hotp_params, MAX_COUNTER)) == 6


def test_verify_exact_counter(rfc4226_params):
    assert hotp.verify(rfc4226_params, "287082", 1)
    assert not hotp.verify(rfc4226_params, "287082", 2)


@pytest.mark.parametrize("window", [0, 1, 3])
def test_window_symmetry(rfc4226_params, window):
    params = rfc4226_params.replace(digits=8)
    base = 100
    for k in range(-window - 2, window + 3):
        code = hotp.generate(params, base + k)
        assert hotp.verify(params, code, base, window) is (abs(k) <= window)


def test_match_returns_matching_counter(rfc4226_params):
    assert hotp.match(rfc4226_params, RFC4226_CODES[5], 4, window=2) == 5
    assert hotp.match(rfc4226_params, RFC4226_CODES[9], 4, window=2) is None


def test_window_below_zero_counter_is_skipped(rfc4226_params):
    assert hotp.verify(rfc4226_params, RFC4226_CODES[0], 0, window=3)
    assert hotp.match(rfc4226_params, RFC4226_CODES[2], 0, window=3) == 2


def test_wrong_length_is_rejected_without_hashing(monkeypatch, rfc4226_params):
    def boom(*args, **kwargs):
        raise AssertionError("generate must not be called")

    monkeypatch.setattr(hotp, "generate", boom)
    assert not hotp.verify(rfc4226_params, "12345", 0, window=5)
    assert not hotp.verify(rfc4226_params, "1234567", 0)
    assert not hotp.verify(rfc4226_params, 755224, 0)


def test_wrong_length_wins_over_invalid_counter(rfc4226_params):
    assert not hotp.verify(rfc4226_params, "12345", -1)
    assert hotp.match(rfc4226_params, "12345", 0, window=-1) is None


def test_non_ascii_code_is_rejected(rfc4226_params):
    assert not hotp.verify(rfc4226_params, "７５５２２４", 0)


def test_verify_rejects_negative_window(rfc4226_params):
    with pytest.raises(InvalidParameter):
        hotp.verify(rfc4226_params, "755224", 0, window=-1)


def test_verify_rejects_negative_counter(rfc4226_params):
    with pytest.raises(InvalidCounter):
        hotp.verify(rfc4226_params, "755224", -1)


def test_missing_hash_is_fatal(monkeypatch, rfc4226_params):
    def unsupported(*args, **kwargs):
        raise ValueError("unsupported hash type")

    monkeypatch.setattr(hotp.hmac, "new", unsupported)
    with pytest.raises(AlgorithmUnavailable):
        hotp.generate(rfc4226_params, 0)
    assert not issubclass(AlgorithmUnavailable, ValueError)


def test_from_uri():
    uri = DEMO_HOTP_URI.replace("counter=0", "counter=7")
    assert hotp.from_uri(uri, 1) == hotp.from_uri(DEMO_HOTP_URI, 1)
    assert len(hotp.from_uri(uri, 1)) == 6
