#!/usr/bin/env python3
"""
cli.py - command line front-end for otpkit.

Subcommands:
- secret  : print a new random Base32 secret
- uri     : build an otpauth:// URI from options
- inspect : show the fields of an otpauth:// URI
- hotp    : HOTP code for a URI and a counter
- totp    : TOTP code for a URI (now, or --at a unix timestamp)
- verify  : check a code against a URI (TOTP uses the clock, HOTP --counter)

Usage examples:
  otpkit secret --bits 160
  otpkit uri --type totp --label alice@example --issuer MyService --digits 8
  otpkit inspect "otpauth://hotp/alice?secret=JBSWY3DPEHPK3PXP&counter=3"
  otpkit hotp "otpauth://hotp/alice?secret=JBSWY3DPEHPK3PXP&counter=0" --counter 42
  otpkit totp "otpauth://totp/alice?secret=JBSWY3DPEHPK3PXP" --at 1707566984
  otpkit verify "otpauth://totp/alice?secret=JBSWY3DPEHPK3PXP" 785021

Exit status: 0 ok, 1 code rejected, 2 invalid input.
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from otpkit import hotp, totp
from otpkit.errors import OtpError
from otpkit.params import DEFAULT_DIGITS, DEFAULT_PERIOD, DEFAULT_SECRET_BITS, OtpParameters, OtpType, Secret
from otpkit.uri import parse, to_uri

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_INVALID = 2

logger = logging.getLogger("otpkit.cli")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[+] %(message)s",
    )


# --- CLI command handlers ---
def cmd_secret(args) -> int:
    secret = Secret.generate(args.bits)
    logger.debug("Generated %d-bit secret", args.bits)
    print(secret.encoded)
    return EXIT_OK


def cmd_uri(args) -> int:
    if args.secret:
        secret = Secret.from_base32(args.secret)
    else:
        secret = Secret.generate(DEFAULT_SECRET_BITS)
        logger.debug("No --secret given, generated a %d-bit one", DEFAULT_SECRET_BITS)
    params = OtpParameters(
        type=args.type,
        label=args.label,
        secret=secret,
        issuer=args.issuer,
        algorithm=args.algorithm,
        digits=args.digits,
        period=args.period,
        counter=args.counter,
    )
    print(to_uri(params))
    return EXIT_OK


def cmd_inspect(args) -> int:
    params = parse(args.uri)
    for key, value in params.as_dict().items():
        if value is None:
            continue
        print(f"{key:<10} {value}")
    return EXIT_OK


def cmd_hotp(args) -> int:
    params = parse(args.uri)
    counter = params.counter if args.counter is None else args.counter
    if counter is None:
        print("[!] --counter is required for TOTP parameters", file=sys.stderr)
        return EXIT_INVALID
    logger.debug("HOTP: %s, counter=%d", params.algorithm.token, counter)
    code = hotp.generate(params, counter)
    print(f"HOTP(counter={counter}): {code}")
    return EXIT_OK


def cmd_totp(args) -> int:
    params = parse(args.uri)
    timestamp = int(time.time()) if args.at is None else args.at
    code = totp.at(params, timestamp)
    remaining = totp.remaining_seconds(params, timestamp)
    logger.debug(
        "TOTP: time=%d, counter=%d, remaining=%ds",
        timestamp, totp.calculate_counter(timestamp, params.period), remaining,
    )
    print(f"TOTP: {code}  (valid ~{remaining:2d}s)")
    return EXIT_OK


def cmd_verify(args) -> int:
    params = parse(args.uri)
    if params.type is OtpType.TOTP:
        window = totp.DEFAULT_TOTP_WINDOW if args.window is None else args.window
        valid = totp.verify(params, args.code, window=window)
        print("[*] valid" if valid else "[!] invalid")
        return EXIT_OK if valid else EXIT_REJECTED

    counter = params.counter if args.counter is None else args.counter
    window = 0 if args.window is None else args.window
    matched = hotp.match(params, args.code, counter, window)
    if matched is None:
        print("[!] invalid")
        return EXIT_REJECTED
    print(f"[*] valid (counter={matched}, next counter={matched + 1})")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="otpkit", description="HOTP/TOTP codes and otpauth:// URIs.")
    p.add_argument("--verbose", action="store_true", help="Verbose output")
    sub = p.add_subparsers(dest="cmd")
    sub.required = True

    # secret
    ps = sub.add_parser("secret", help="Print a random Base32 secret")
    ps.add_argument("--bits", type=int, default=DEFAULT_SECRET_BITS, help="Secret size in bits (multiple of 8)")
    ps.set_defaults(func=cmd_secret)

    # uri
    pu = sub.add_parser("uri", help="Build an otpauth:// URI")
    pu.add_argument("--type", choices=["totp", "hotp"], default="totp")
    pu.add_argument("--label", required=True, help="Account label, e.g. 'Example:alice@example.com'")
    pu.add_argument("--secret", help="Base32 secret (generated when omitted)")
    pu.add_argument("--issuer")
    pu.add_argument("--algorithm", choices=["sha1", "sha256", "sha512"], default="sha1", type=str.lower)
    pu.add_argument("--digits", type=int, default=DEFAULT_DIGITS)
    pu.add_argument("--period", type=int, default=None, help=f"TOTP time step (default {DEFAULT_PERIOD}s)")
    pu.add_argument("--counter", type=int, default=None, help="HOTP counter (default 0)")
    pu.set_defaults(func=cmd_uri)

    # inspect
    pi = sub.add_parser("inspect", help="Show the fields of an otpauth:// URI")
    pi.add_argument("uri")
    pi.set_defaults(func=cmd_inspect)

    # hotp
    ph = sub.add_parser("hotp", help="Generate the HOTP code for a counter")
    ph.add_argument("uri")
    ph.add_argument("--counter", type=int, default=None, help="Defaults to the URI's counter")
    ph.set_defaults(func=cmd_hotp)

    # totp
    pt = sub.add_parser("totp", help="Generate the TOTP code")
    pt.add_argument("uri")
    pt.add_argument("--at", type=int, default=None, help="Unix timestamp (default: now)")
    pt.set_defaults(func=cmd_totp)

    # verify
    pv = sub.add_parser("verify", help="Verify a code")
    pv.add_argument("uri")
    pv.add_argument("code")
    pv.add_argument("--counter", type=int, default=None, help="HOTP counter (default: the URI's)")
    pv.add_argument("--window", type=int, default=None, help="Accepted steps on each side")
    pv.set_defaults(func=cmd_verify)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    try:
        return args.func(args)
    except OtpError as e:
        print(f"[!] {type(e).__name__}: {e}", file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
