"""
otpkit_server package

Stateless Flask API exposing the otpkit core (secret generation, otpauth://
URIs, HOTP / TOTP generation and verification). Nothing is stored: every
request carries the credential as an otpauth:// URI.
"""

from .app import create_app

__all__ = ["create_app"]
