"""
params.py - immutable parameter model for an OTP credential.

An OtpParameters value carries everything needed to produce codes:
type (TOTP / HOTP), label, optional issuer, the shared secret, the HMAC
algorithm, the digit count and either a period (TOTP) or a counter (HOTP).

The constructor is the only way in. It coerces raw inputs (tokens, ints,
Base32 text) into the closed enums below, applies the per-type defaults and
raises an otpkit.errors exception for anything it cannot accept. Values are
frozen; use replace() to derive a modified copy.
"""

import base64
import binascii
import dataclasses
import enum
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from otpkit.errors import (
    InvalidAlgorithm,
    InvalidCounter,
    InvalidDigits,
    InvalidOtpType,
    InvalidParameter,
    InvalidPeriod,
    InvalidSecretEncoding,
    MissingSecret,
)

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6
DEFAULT_PERIOD = 30            # TOTP step (seconds)
DEFAULT_COUNTER = 0
DEFAULT_SECRET_BITS = 160      # 20 bytes, RFC 4226 recommendation
MAX_COUNTER = 2 ** 64 - 1      # counter travels as 8 unsigned bytes


# --- Closed sets -------------------------------------------------------------
class OtpType(enum.Enum):
    TOTP = "totp"
    HOTP = "hotp"

    @classmethod
    def from_token(cls, token: Union[str, "OtpType"]) -> "OtpType":
        """Map the URI host token (case-insensitive) to a member."""
        if isinstance(token, cls):
            return token
        if isinstance(token, str):
            lowered = token.lower()
            if lowered == "totp":
                return cls.TOTP
            if lowered == "hotp":
                return cls.HOTP
        raise InvalidOtpType(f"Unknown OTP type: {token!r}")


class Algorithm(enum.Enum):
    """HMAC hash. The value is the lower-case URI token."""

    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"

    @property
    def token(self) -> str:
        return self.value

    @property
    def hash_name(self) -> str:
        """Digest name understood by hmac.new / hashlib.new."""
        if self is Algorithm.SHA1:
            return "sha1"
        if self is Algorithm.SHA256:
            return "sha256"
        if self is Algorithm.SHA512:
            return "sha512"
        raise InvalidAlgorithm(f"Unsupported algorithm: {self!r}")

    @classmethod
    def from_token(cls, token: Union[str, "Algorithm"]) -> "Algorithm":
        if isinstance(token, cls):
            return token
        if isinstance(token, str):
            lowered = token.lower()
            if lowered == "sha1":
                return cls.SHA1
            if lowered == "sha256":
                return cls.SHA256
            if lowered == "sha512":
                return cls.SHA512
        raise InvalidAlgorithm(f"Unsupported algorithm: {token!r}")


class Digits(enum.IntEnum):
    SIX = 6
    SEVEN = 7
    EIGHT = 8

    @property
    def modulus(self) -> int:
        return 10 ** self.value

    @classmethod
    def from_value(cls, value: Union[int, "Digits"]) -> "Digits":
        if isinstance(value, cls):
            return value
        # bool is an int subclass; True must not pass as a digit count
        if isinstance(value, int) and not isinstance(value, bool):
            if value == 6:
                return cls.SIX
            if value == 7:
                return cls.SEVEN
            if value == 8:
                return cls.EIGHT
        raise InvalidDigits(f"Unsupported digit count: {value!r} (expected 6, 7 or 8)")


class Period(enum.IntEnum):
    FIFTEEN = 15
    THIRTY = 30
    SIXTY = 60

    @classmethod
    def from_value(cls, value: Union[int, "Period"]) -> "Period":
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            if value == 15:
                return cls.FIFTEEN
            if value == 30:
                return cls.THIRTY
            if value == 60:
                return cls.SIXTY
        raise InvalidPeriod(f"Unsupported period: {value!r} (expected 15, 30 or 60)")


def validate_counter(value: Any) -> int:
    """
    Check that value is usable as an HOTP moving factor.

    Returns the counter unchanged.

    Raises:
        InvalidCounter: not an int, negative, or larger than 64 bits
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidCounter(f"Counter must be an integer, got {value!r}")
    if value < 0:
        raise InvalidCounter(f"Counter cannot be negative: {value}")
    if value > MAX_COUNTER:
        raise InvalidCounter(f"Counter does not fit in 64 bits: {value}")
    return value


# --- Secret ----------------------------------------------------------------
@dataclass(frozen=True)
class Secret:
    """
    Shared key material.

    `value` holds the raw bytes fed to HMAC; `encoded` is the Base32 text used
    on the wire (upper case, padding stripped the way authenticator apps
    expect). repr() never shows the key.
    """

    value: bytes = field(repr=False)

    def __post_init__(self):
        if not isinstance(self.value, (bytes, bytearray)):
            raise InvalidParameter(f"Secret must be bytes, got {type(self.value).__name__}")
        if not self.value:
            raise MissingSecret("Secret cannot be empty")
        # bytearray is mutable; keep an immutable copy
        object.__setattr__(self, "value", bytes(self.value))

    def __repr__(self) -> str:
        return f"Secret(<{len(self.value)} bytes>)"

    @property
    def encoded(self) -> str:
        return base64.b32encode(self.value).decode("ascii").rstrip("=")

    @classmethod
    def from_base32(cls, text: str) -> "Secret":
        """
        Decode a Base32 secret as printed by provisioning tools.

        - Case-insensitive.
        - Whitespace (grouping like "JBSW Y3DP") is ignored.
        - "=" padding is optional.

        Raises:
            MissingSecret: text is empty
            InvalidSecretEncoding: text is not valid Base32
        """
        if not isinstance(text, str):
            raise InvalidSecretEncoding(f"Secret text must be str, got {type(text).__name__}")
        compact = "".join(text.split()).rstrip("=")
        if not compact:
            raise MissingSecret("Secret cannot be empty")
        if not compact.isascii():
            raise InvalidSecretEncoding("Invalid Base32 secret")
        padded = compact + "=" * (-len(compact) % 8)
        try:
            raw = base64.b32decode(padded, casefold=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidSecretEncoding("Invalid Base32 secret") from e
        return cls(raw)

    @classmethod
    def generate(cls, bits: int = DEFAULT_SECRET_BITS) -> "Secret":
        """
        Create a random secret from os.urandom (CSPRNG).

        Arguments:
            bits: key size, a positive multiple of 8 (default 160)
        """
        if not isinstance(bits, int) or isinstance(bits, bool) or bits <= 0 or bits % 8:
            raise InvalidParameter(f"Secret size must be a positive multiple of 8 bits, got {bits!r}")
        return cls(os.urandom(bits // 8))

    @classmethod
    def coerce(cls, value: Union["Secret", str, bytes, bytearray, None]) -> "Secret":
        """Accept a Secret, Base32 text or raw bytes."""
        if value is None:
            raise MissingSecret("Secret is required")
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_base32(value)
        return cls(value)


# --- Parameters --------------------------------------------------------------
@dataclass(frozen=True)
class OtpParameters:
    """
    Everything needed to generate codes for one credential.

    Only `type`, `label` and `secret` are required. Invariants enforced at
    construction:

    - TOTP: period defaults to 30, counter is always None.
    - HOTP: counter defaults to 0, period is always None.
    """

    type: Optional[OtpType] = None
    label: Optional[str] = None
    secret: Optional[Secret] = None
    issuer: Optional[str] = None
    algorithm: Algorithm = Algorithm.SHA1
    digits: Digits = Digits.SIX
    period: Optional[Period] = None
    counter: Optional[int] = None

    def __post_init__(self):
        if self.type is None:
            raise InvalidOtpType("OTP type is required")
        otp_type = OtpType.from_token(self.type)

        if self.label is None:
            raise InvalidParameter("Label is required")
        if not isinstance(self.label, str):
            raise InvalidParameter(f"Label must be str, got {type(self.label).__name__}")
        if self.issuer is not None and not isinstance(self.issuer, str):
            raise InvalidParameter(f"Issuer must be str, got {type(self.issuer).__name__}")

        set_ = object.__setattr__
        set_(self, "type", otp_type)
        set_(self, "secret", Secret.coerce(self.secret))
        set_(self, "algorithm", Algorithm.from_token(self.algorithm))
        set_(self, "digits", Digits.from_value(self.digits))

        if otp_type is OtpType.TOTP:
            period = DEFAULT_PERIOD if self.period is None else self.period
            set_(self, "period", Period.from_value(period))
            set_(self, "counter", None)
        else:
            counter = DEFAULT_COUNTER if self.counter is None else self.counter
            set_(self, "counter", validate_counter(counter))
            set_(self, "period", None)

    def replace(self, **changes) -> "OtpParameters":
        """Return a new, re-validated value with `changes` applied."""
        return dataclasses.replace(self, **changes)

    def as_dict(self) -> Dict[str, Any]:
        """JSON-friendly view; the secret is given in its Base32 form."""
        return {
            "type": self.type.value,
            "label": self.label,
            "issuer": self.issuer,
            "secret": self.secret.encoded,
            "algorithm": self.algorithm.token,
            "digits": int(self.digits),
            "period": None if self.period is None else int(self.period),
            "counter": self.counter,
        }
