from typing import Protocol, Optional
from datetime import datetime

class PendingVerification:
    def __init__(self, phone_number: str, otp: str, expires_at: datetime,
                 created_at: Optional[datetime] = None):
        self.phone_number = phone_number
        self.otp = otp
        self.expires_at = expires_at
        self.created_at = created_at

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

class VerificationRepository(Protocol):
    def store_otp(self, phone_number: str, otp: str) -> None:
        """Write the pending OTP for a phone number, replacing any earlier one."""
        ...

    def get(self, phone_number: str) -> Optional[PendingVerification]:
        ...
