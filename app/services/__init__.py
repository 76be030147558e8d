# Services package (re-export feature modules for stable imports)
from .auth.otp_service import OTPService

__all__ = [
    "OTPService",
]
