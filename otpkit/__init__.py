"""
otpkit package
==============

One-time passwords (HOTP / TOTP) per RFC 4226 and RFC 6238, plus the
otpauth:// URI format used by authenticator apps.

──────────────────────────────────────────────
Core algorithm
──────────────────────────────────────────────
- HOTP (HMAC-based One-Time Password):
  code = Truncate(HMAC-<alg>(key=secret, msg=counter)) mod 10^digits
  -> counter moves forward on every use (event-based tokens).

- TOTP (Time-based One-Time Password):
  HOTP with counter = floor(unix_time / period)
  -> period is 15, 30 (default) or 60 seconds.

- Dynamic truncation:
  4 bytes are taken from the HMAC at offset (last byte & 0x0F), the sign bit
  is cleared and the result is reduced to 6, 7 or 8 decimal digits.

──────────────────────────────────────────────
Modules
──────────────────────────────────────────────
- otpkit.params  immutable OtpParameters and its closed enums
- otpkit.hotp    generate / match / verify for a counter
- otpkit.totp    at / now / verify for a point in time
- otpkit.uri     parse / to_uri for otpauth:// URIs
- otpkit.errors  OtpError hierarchy
- otpkit.cli     `otpkit` command line

──────────────────────────────────────────────
Quick example
──────────────────────────────────────────────
>>> from otpkit import OtpParameters, OtpType, totp, to_uri
>>> params = OtpParameters(type=OtpType.TOTP, label="alice", secret="JBSWY3DPEHPK3PXP")
>>> totp.at(params, 1707566984)
'785021'
>>> to_uri(params)
'otpauth://totp/alice?secret=JBSWY3DPEHPK3PXP'
"""

from otpkit import hotp, totp
from otpkit.errors import (
    AlgorithmUnavailable,
    InvalidAlgorithm,
    InvalidCounter,
    InvalidDigits,
    InvalidOtpType,
    InvalidParameter,
    InvalidPeriod,
    InvalidSecretEncoding,
    MalformedUri,
    MissingSecret,
    OtpError,
)
from otpkit.params import (
    Algorithm,
    Digits,
    OtpParameters,
    OtpType,
    Period,
    Secret,
)
from otpkit.uri import parse, to_uri

__version__ = "1.0.0"

__all__ = [
    "hotp",
    "totp",
    "parse",
    "to_uri",
    "OtpParameters",
    "OtpType",
    "Algorithm",
    "Digits",
    "Period",
    "Secret",
    "OtpError",
    "InvalidParameter",
    "InvalidOtpType",
    "InvalidAlgorithm",
    "InvalidDigits",
    "InvalidPeriod",
    "InvalidCounter",
    "MissingSecret",
    "InvalidSecretEncoding",
    "MalformedUri",
    "AlgorithmUnavailable",
]
