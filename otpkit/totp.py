"""
totp.py - TOTP (RFC 6238) on top of the HOTP engine.

    counter = floor(unix_time / period)

The wall clock is injectable: every function that needs "now" takes a
`clock` callable returning unix seconds (time.time by default).
"""

import time
from typing import Callable, Optional

from otpkit import hotp
from otpkit.errors import InvalidOtpType, InvalidParameter
from otpkit.params import OtpParameters, OtpType
from otpkit.uri import parse

DEFAULT_TOTP_WINDOW = 1     # +/- one period of clock skew

Clock = Callable[[], float]


def calculate_counter(unix_seconds: float, period: int) -> int:
    """
    Time step index for `unix_seconds`.

    Integer division only: fractional seconds are dropped before dividing so
    that every timestamp inside the same period maps to the same counter.
    """
    return int(unix_seconds) // int(period)


def _check_otp_type(params: OtpParameters) -> None:
    if params.type is not OtpType.TOTP:
        raise InvalidOtpType(f"Expected TOTP parameters, got {params.type.value.upper()}")


def at(params: OtpParameters, unix_seconds: float) -> str:
    """
    TOTP code valid at `unix_seconds`.

    Useful for tests and for looking up historical codes.
    """
    _check_otp_type(params)
    counter = calculate_counter(unix_seconds, params.period)
    return hotp.generate(params, counter)


def now(params: OtpParameters, clock: Clock = time.time) -> str:
    """TOTP code for the current period."""
    return at(params, clock())


def verify(
    params: OtpParameters,
    code: str,
    window: int = DEFAULT_TOTP_WINDOW,
    clock: Clock = time.time,
) -> bool:
    """
    Check a user-supplied TOTP code against the current time.

    Arguments:
        params: TOTP parameters
        code: the code to check
        window: how many periods before/after now are accepted (>= 0).
                The default of 1 tolerates +/- one period of clock skew.
        clock: unix-seconds source

    Raises:
        InvalidOtpType: params are not TOTP
        InvalidParameter: negative window
    """
    _check_otp_type(params)
    if not isinstance(window, int) or isinstance(window, bool) or window < 0:
        raise InvalidParameter(f"Window must be a non-negative integer, got {window!r}")
    counter = calculate_counter(clock(), params.period)
    return hotp.verify(params, code, counter, window)


def remaining_seconds(
    params: OtpParameters,
    unix_seconds: Optional[float] = None,
    clock: Clock = time.time,
) -> int:
    """Seconds left before the current code rolls over (1..period)."""
    _check_otp_type(params)
    if unix_seconds is None:
        unix_seconds = clock()
    period = int(params.period)
    return period - (int(unix_seconds) % period)


def from_uri(uri: str, clock: Clock = time.time) -> str:
    """Parse an otpauth:// URI and return the current TOTP code."""
    return now(parse(uri), clock)
