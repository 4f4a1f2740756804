"""
errors.py - exception hierarchy for otpkit.

Every input problem raises a subclass of OtpError (a ValueError). Nothing
here is retried or corrected: a malformed value is reported to the caller
as-is.

AlgorithmUnavailable is not an OtpError: it signals a broken runtime, not
bad input.
"""


class OtpError(ValueError):
    """Base class for every caller-input error raised by otpkit."""


class InvalidParameter(OtpError):
    """A credential field is missing or outside its allowed set."""


class InvalidOtpType(InvalidParameter):
    """Unknown type token, or a TOTP operation on HOTP parameters."""


class InvalidAlgorithm(InvalidParameter):
    pass


class InvalidDigits(InvalidParameter):
    pass


class InvalidPeriod(InvalidParameter):
    pass


class InvalidCounter(InvalidParameter):
    """Counter is negative, not an integer, or wider than 64 bits."""


class MissingSecret(InvalidParameter):
    pass


class InvalidSecretEncoding(InvalidParameter):
    """The secret text is not valid Base32."""


class MalformedUri(OtpError):
    """Wrong scheme, missing path or an unparsable query string."""


class AlgorithmUnavailable(RuntimeError):
    """The requested HMAC digest is not provided by this Python runtime."""
