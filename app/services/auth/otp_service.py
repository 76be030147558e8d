# app/services/auth/otp_service.py
import logging
import secrets

from app.application.ports.otp_generator import OTPGenerator

logger = logging.getLogger(__name__)

OTP_MIN_VALUE = 100000
OTP_MAX_VALUE = 999999


class OTPService(OTPGenerator):
    """Issues six-digit numeric one-time passwords.

    Values are drawn uniformly from [100000, 999999] with the ``secrets``
    module, so a code never starts with a zero and is not predictable from
    earlier codes.
    """

    def generate_otp(self) -> str:
        value = OTP_MIN_VALUE + secrets.randbelow(OTP_MAX_VALUE - OTP_MIN_VALUE + 1)
        return str(value)
