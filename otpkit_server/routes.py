"""
OTPKIT API ROUTES - FLASK BLUEPRINT

Every endpoint takes a JSON body and is stateless: the credential travels as
an otpauth:// URI, nothing is written anywhere.

EXAMPLES:
curl -X POST http://localhost:5000/api/secret -H "Content-Type: application/json" -d "{}"
curl -X POST http://localhost:5000/api/uri -H "Content-Type: application/json" \
     -d '{"type": "totp", "label": "alice@example", "issuer": "MyService"}'
curl -X POST http://localhost:5000/api/totp -H "Content-Type: application/json" \
     -d '{"uri": "otpauth://totp/alice?secret=JBSWY3DPEHPK3PXP"}'
"""

import logging
import time

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadRequest

from otpkit import hotp, totp
from otpkit.errors import InvalidOtpType
from otpkit.params import DEFAULT_SECRET_BITS, OtpParameters, OtpType, Secret
from otpkit.uri import parse, to_uri

logger = logging.getLogger(__name__)

otp_bp = Blueprint("otp", __name__, url_prefix="/api")


def _json_body(*required: str) -> dict:
    """Return the JSON object of the request; 400 if it lacks `required` keys."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise BadRequest("JSON body must be an object")
    missing = [key for key in required if data.get(key) is None]
    if missing:
        raise BadRequest(f"Missing required field(s): {', '.join(missing)}")
    return data


def _clock():
    return current_app.config.get("OTP_CLOCK") or time.time


def _window(data: dict, default_key: str):
    """Requested look-around window, capped at MAX_WINDOW."""
    window = data.get("window")
    if window is None:
        window = current_app.config[default_key]
    limit = current_app.config["MAX_WINDOW"]
    if isinstance(window, int) and not isinstance(window, bool) and window > limit:
        raise BadRequest(f"window may not exceed {limit}")
    return window


@otp_bp.route("/secret", methods=["POST"])
def generate_secret():
    """
    New random Base32 secret.

    Input:  {"bits": 160}      (optional, multiple of 8, at most MAX_SECRET_BITS)
    Output: {"secret": "...", "bits": 160}
    """
    data = _json_body()
    bits = data.get("bits", DEFAULT_SECRET_BITS)
    limit = current_app.config["MAX_SECRET_BITS"]
    if isinstance(bits, int) and not isinstance(bits, bool) and bits > limit:
        raise BadRequest(f"bits may not exceed {limit}")
    secret = Secret.generate(bits)
    logger.info("Generated %d-bit secret", bits)
    return jsonify({"secret": secret.encoded, "bits": bits})


@otp_bp.route("/uri", methods=["POST"])
def build_uri():
    """
    Build an otpauth:// URI.

    Input (JSON body):
      {
        "type": "totp",          # REQUIRED, totp | hotp
        "label": "alice",        # REQUIRED
        "secret": "JBSW...",     # Base32, generated when omitted
        "issuer": "MyService",
        "algorithm": "sha1",
        "digits": 6,
        "period": 30,            # TOTP
        "counter": 0             # HOTP
      }

    Output: {"uri": "otpauth://...", "secret": "JBSW..."}
    """
    data = _json_body("type", "label")
    secret = data.get("secret")
    if secret is None:
        secret = Secret.generate()
    params = OtpParameters(
        type=data["type"],
        label=data["label"],
        secret=secret,
        issuer=data.get("issuer"),
        algorithm=data.get("algorithm", "sha1"),
        digits=data.get("digits", 6),
        period=data.get("period"),
        counter=data.get("counter"),
    )
    return jsonify({"uri": to_uri(params), "secret": params.secret.encoded})


@otp_bp.route("/parse", methods=["POST"])
def parse_uri():
    """
    Decode an otpauth:// URI.

    Input:  {"uri": "otpauth://..."}
    Output: {"type", "label", "issuer", "secret", "algorithm", "digits",
             "period", "counter"}
    """
    data = _json_body("uri")
    return jsonify(parse(data["uri"]).as_dict())


@otp_bp.route("/hotp", methods=["POST"])
def get_hotp():
    """
    HOTP code.

    Input:  {"uri": "...", "counter": 1}   (counter defaults to the URI's)
    Output: {"code": "123456", "counter": 1}
    """
    data = _json_body("uri")
    params = parse(data["uri"])
    counter = data.get("counter")
    if counter is None:
        counter = params.counter
    if counter is None:
        raise BadRequest("Counter is required for TOTP parameters")
    code = hotp.generate(params, counter)
    return jsonify({"code": code, "counter": counter})


@otp_bp.route("/totp", methods=["POST"])
def get_totp():
    """
    TOTP code.

    Input:  {"uri": "...", "timestamp": 1707566984}   (timestamp optional)
    Output: {"code": "785021", "counter": ..., "remaining": 16}
    """
    data = _json_body("uri")
    params = parse(data["uri"])
    timestamp = data.get("timestamp")
    if timestamp is None:
        timestamp = int(_clock()())
    elif not isinstance(timestamp, int) or isinstance(timestamp, bool):
        raise BadRequest("timestamp must be an integer")
    code = totp.at(params, timestamp)
    return jsonify({
        "code": code,
        "counter": totp.calculate_counter(timestamp, params.period),
        "remaining": totp.remaining_seconds(params, timestamp),
    })


@otp_bp.route("/verify_hotp", methods=["POST"])
def verify_hotp_route():
    """
    Verify an HOTP code.

    Input:
      {
        "uri": "...",       # REQUIRED
        "code": "123456",   # REQUIRED
        "counter": 1,       # defaults to the URI's counter
        "window": 1         # accepted steps on each side, at most MAX_WINDOW
      }

    Output:
      {"valid": true, "new_counter": 2}   # next counter to store
      {"valid": false}
    """
    data = _json_body("uri", "code")
    params = parse(data["uri"])
    if params.type is not OtpType.HOTP:
        raise InvalidOtpType("Expected HOTP parameters, got TOTP")
    counter = data.get("counter")
    if counter is None:
        counter = params.counter
    window = _window(data, "HOTP_WINDOW")

    matched = hotp.match(params, data["code"], counter, window)
    if matched is None:
        logger.info("HOTP verification failed for label=%r", params.label)
        return jsonify({"valid": False})
    return jsonify({"valid": True, "new_counter": matched + 1})


@otp_bp.route("/verify_totp", methods=["POST"])
def verify_totp_route():
    """
    Verify a TOTP code against the server clock.

    Input:  {"uri": "...", "code": "123456", "window": 1}
    Output: {"valid": true} or {"valid": false}
    """
    data = _json_body("uri", "code")
    params = parse(data["uri"])
    window = _window(data, "TOTP_WINDOW")

    valid = totp.verify(params, data["code"], window=window, clock=_clock())
    if not valid:
        logger.info("TOTP verification failed for label=%r", params.label)
    return jsonify({"valid": valid})
