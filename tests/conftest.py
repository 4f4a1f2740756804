import pytest

from otpkit.params import OtpParameters, OtpType, Secret
from otpkit_server import create_app
from otpkit_server.config import TestConfig

# RFC 4226 Appendix D / RFC 6238 Appendix B seeds
RFC_SHA1_KEY = b"12345678901234567890"
RFC_SHA256_KEY = b"12345678901234567890123456789012"
RFC_SHA512_KEY = b"1234567890" * 6 + b"1234"

DEMO_SECRET = "JBSWY3DPEHPK3PXP"
DEMO_TOTP_URI = f"otpauth://totp/alice?secret={DEMO_SECRET}"
DEMO_HOTP_URI = f"otpauth://hotp/alice?secret={DEMO_SECRET}&counter=0"


@pytest.fixture
def totp_params():
    return OtpParameters(type=OtpType.TOTP, label="test", secret=Secret.from_base32(DEMO_SECRET))


@pytest.fixture
def hotp_params():
    return OtpParameters(type=OtpType.HOTP, label="test", secret=Secret.from_base32(DEMO_SECRET))


@pytest.fixture
def rfc4226_params():
    return OtpParameters(type=OtpType.HOTP, label="rfc4226", secret=Secret(RFC_SHA1_KEY))


@pytest.fixture
def app():
    app = create_app(TestConfig)
    app.config.update(OTP_CLOCK=lambda: 1707566984)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
