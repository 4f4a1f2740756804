"""
hotp.py - HOTP (RFC 4226) code generation and verification.

Pure functions; nothing here reads the clock, touches files or logs.

    code = Truncate(HMAC-<alg>(key=secret, msg=counter)) mod 10^digits
"""

import hmac
import struct
from typing import Optional

from otpkit.errors import AlgorithmUnavailable, InvalidParameter
from otpkit.params import MAX_COUNTER, OtpParameters, validate_counter
from otpkit.uri import parse


# --- RFC helpers -----------------------------------------------------------
def int_to_bytes(i: int) -> bytes:
    """
    Encode a counter as the 8-byte big-endian message RFC 4226 requires.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'
    """
    return struct.pack(">Q", i)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    Apply RFC 4226 section 5.3 dynamic truncation.

    - offset = low nibble of the last byte
    - take 4 bytes at offset, clear the top bit of the first one
    - read them as a big-endian 31-bit unsigned integer

    Arguments:
        hmac_digest: HMAC output (20, 32 or 64 bytes)
    """
    # offset <= 15, so offset + 4 stays inside even a SHA1 digest
    offset = hmac_digest[-1] & 0x0F
    code = (
        ((hmac_digest[offset] & 0x7F) << 24)
        | ((hmac_digest[offset + 1] & 0xFF) << 16)
        | ((hmac_digest[offset + 2] & 0xFF) << 8)
        | (hmac_digest[offset + 3] & 0xFF)
    )
    return code


def _hmac_digest(params: OtpParameters, msg: bytes) -> bytes:
    name = params.algorithm.hash_name
    try:
        mac = hmac.new(params.secret.value, msg, name)
    except ValueError as e:
        raise AlgorithmUnavailable(f"HMAC-{name.upper()} is not available in this runtime") from e
    return mac.digest()


# --- Generation ------------------------------------------------------------
def generate(params: OtpParameters, counter: int) -> str:
    """
    Generate the HOTP code for `counter`.

    Steps:
    1. Message = 8-byte big-endian counter
    2. HMAC(params.algorithm, params.secret, message)
    3. Dynamic truncation -> 31-bit integer
    4. otp = value % 10^digits
    5. Zero-pad to exactly `digits` characters (leading zeros are significant)

    Arguments:
        params: credential parameters (type is not checked, TOTP delegates here)
        counter: moving factor, 0 <= counter < 2**64

    Returns:
        str: the zero-padded code

    Raises:
        InvalidCounter: negative, non-integer or oversized counter
        AlgorithmUnavailable: the runtime lacks the HMAC hash
    """
    validate_counter(counter)

    digest = _hmac_digest(params, int_to_bytes(counter))
    otp_val = dynamic_truncate(digest) % params.digits.modulus
    return str(otp_val).zfill(params.digits)


# --- Verification ----------------------------------------------------------
def match(params: OtpParameters, code: str, counter: int, window: int = 0) -> Optional[int]:
    """
    Find the counter that produced `code`.

    Checks counter - window .. counter + window in that order and returns the
    first counter whose code equals `code`, or None. Candidates outside the
    64-bit counter range are skipped. A code whose length differs from
    params.digits is rejected before any hashing.

    The caller resynchronises with `matched + 1` as its next counter.

    Raises:
        InvalidCounter: `counter` itself is invalid
        InvalidParameter: negative window
    """
    if not isinstance(code, str) or len(code) != params.digits:
        return None

    validate_counter(counter)
    if not isinstance(window, int) or isinstance(window, bool) or window < 0:
        raise InvalidParameter(f"Window must be a non-negative integer, got {window!r}")

    candidate = code.encode("utf-8")
    for offset in range(-window, window + 1):
        test_counter = counter + offset
        if test_counter < 0 or test_counter > MAX_COUNTER:
            continue
        expected = generate(params, test_counter)
        if hmac.compare_digest(expected.encode("ascii"), candidate):
            return test_counter
    return None


def verify(params: OtpParameters, code: str, counter: int, window: int = 0) -> bool:
    """
    Check `code` against counter +/- window.

    window=0 checks exactly `counter`.
    """
    return match(params, code, counter, window) is not None


def from_uri(uri: str, counter: int) -> str:
    """Parse an otpauth:// URI and generate the code for `counter`."""
    return generate(parse(uri), counter)
