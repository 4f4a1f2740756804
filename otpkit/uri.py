"""
uri.py - otpauth:// URI codec.

    otpauth://{totp|hotp}/{label}?secret=...&issuer=...&algorithm=...
                                 &digits=...&period=...&counter=...

parse() turns a URI into OtpParameters; to_uri() produces the canonical form,
omitting the fields that equal their defaults (SHA1, 6 digits, 30s period).
parse(to_uri(p)) == p for every valid p.
"""

from typing import Dict
from urllib.parse import quote, unquote, unquote_plus, urlsplit

from otpkit.errors import (
    InvalidCounter,
    InvalidDigits,
    InvalidPeriod,
    MalformedUri,
    MissingSecret,
)
from otpkit.params import (
    MAX_COUNTER,
    Algorithm,
    Digits,
    OtpParameters,
    OtpType,
    Period,
    Secret,
)

SCHEME = "otpauth"
MAX_COUNTER_DIGITS = len(str(MAX_COUNTER))


def _split_query(query: str) -> Dict[str, str]:
    """
    Split `a=1&b=2` into an ordered dict, percent-decoding both sides.

    Empty segments are skipped; a later duplicate overwrites an earlier one.
    """
    pairs = {}
    for segment in query.split("&"):
        if not segment:
            continue
        key, sep, value = segment.partition("=")
        if not sep:
            raise MalformedUri(f"Query parameter without '=': {segment!r}")
        pairs[unquote_plus(key)] = unquote_plus(value)
    return pairs


def _parse_int(value: str, error_cls, name: str, max_len: int) -> int:
    # plain ASCII digits only: no sign, whitespace or underscores
    if not (value.isascii() and value.isdigit()) or len(value) > max_len:
        raise error_cls(f"Invalid {name}: {value!r}")
    return int(value)


def parse(uri: str) -> OtpParameters:
    """
    Decode an otpauth:// URI.

    - scheme must be `otpauth`
    - host is the type token (`totp` / `hotp`, any case)
    - path without its leading "/" is the label
    - recognised query keys: secret, issuer, algorithm, digits, period,
      counter; anything else is ignored

    Missing period / counter are filled in by OtpParameters.

    Raises:
        MalformedUri: wrong scheme, no path, bad query string
        InvalidOtpType, InvalidAlgorithm, InvalidDigits, InvalidPeriod,
        InvalidCounter, MissingSecret, InvalidSecretEncoding
    """
    if not isinstance(uri, str):
        raise MalformedUri(f"URI must be str, got {type(uri).__name__}")
    try:
        parts = urlsplit(uri)
    except ValueError as e:
        raise MalformedUri(f"Unparsable URI: {e}") from e

    if parts.scheme.lower() != SCHEME:
        raise MalformedUri(f"Expected scheme '{SCHEME}', got {parts.scheme!r}")

    otp_type = OtpType.from_token(parts.netloc)

    if not parts.path.startswith("/"):
        raise MalformedUri("URI has no label path")
    label = unquote(parts.path[1:])

    query = _split_query(parts.query)

    if "secret" not in query:
        raise MissingSecret("URI has no 'secret' parameter")

    fields = {
        "type": otp_type,
        "label": label,
        "secret": Secret.from_base32(query["secret"]),
    }
    for key, value in query.items():
        if key == "issuer":
            fields["issuer"] = value
        elif key == "algorithm":
            fields["algorithm"] = Algorithm.from_token(value)
        elif key == "digits":
            fields["digits"] = Digits.from_value(_parse_int(value, InvalidDigits, "digits", 2))
        elif key == "period":
            fields["period"] = Period.from_value(_parse_int(value, InvalidPeriod, "period", 2))
        elif key == "counter":
            fields["counter"] = _parse_int(value, InvalidCounter, "counter", MAX_COUNTER_DIGITS)

    return OtpParameters(**fields)


def to_uri(params: OtpParameters) -> str:
    """
    Encode parameters as an otpauth:// URI.

    Field order is fixed: secret, issuer, algorithm, digits, period, counter.
    Defaults are left out except `counter`, which HOTP always carries.
    """
    uri = (
        f"{SCHEME}://{params.type.value}/{quote(params.label, safe='')}"
        f"?secret={params.secret.encoded}"
    )

    if params.issuer is not None:
        uri += f"&issuer={quote(params.issuer, safe='')}"

    if params.algorithm is not Algorithm.SHA1:
        uri += f"&algorithm={params.algorithm.token}"

    if params.digits is not Digits.SIX:
        uri += f"&digits={int(params.digits)}"

    if params.type is OtpType.TOTP and params.period is not Period.THIRTY:
        uri += f"&period={int(params.period)}"

    if params.type is OtpType.HOTP:
        uri += f"&counter={params.counter}"

    return uri
