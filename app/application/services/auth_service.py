import logging
from dataclasses import dataclass
from typing import Optional

from ..ports.user_repo import UserRepository
from ..ports.verification_repo import VerificationRepository
from ..ports.user_id_allocator import UserIdAllocator
from ..ports.otp_generator import OTPGenerator
from ..ports.audit_logger import AuditLogger
from ...exceptions import ValidationError, ConflictError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedOtp:
    user_id: int
    otp: str


def _clean(value: Optional[str]) -> str:
    # Stripped values are the lookup and document keys: " +1555" and "+1555" are one phone number
    return value.strip() if isinstance(value, str) else ""


@dataclass
class AuthService:
    """Registration and login workflows.

    Neither workflow is a single transaction: uniqueness checks, id
    allocation, the OTP write and the user write are separate store calls,
    and nothing is rolled back if a later step fails. Two concurrent
    registrations for the same phone or email can therefore both succeed.
    """
    user_repo: UserRepository
    verification_repo: VerificationRepository
    id_allocator: UserIdAllocator
    otp_generator: OTPGenerator
    audit: Optional[AuditLogger] = None

    def _audit(self, action: str, phone: str, user_id: Optional[int] = None, success: bool = True, **details) -> None:
        if self.audit is not None:
            self.audit.log(action, phone, user_id=user_id, success=success, details=details)

    def _issue_otp(self, phone_number: str) -> str:
        otp = self.otp_generator.generate_otp()
        self.verification_repo.store_otp(phone_number, otp)
        logger.info(f"Stored OTP for phone: {phone_number}")
        return otp

    def register(self, phone_number: Optional[str], full_name: Optional[str], email: Optional[str]) -> IssuedOtp:
        phone_number, full_name, email = _clean(phone_number), _clean(full_name), _clean(email)
        if not phone_number or not full_name or not email:
            raise ValidationError("Missing required fields")

        logger.info(f"Processing register request for phone: {phone_number}")
        if self.user_repo.get_by_phone(phone_number) is not None:
            self._audit("register_rejected", phone_number, success=False, reason="PHONE_ALREADY_EXISTS")
            raise ConflictError("Phone number already registered")
        if self.user_repo.get_by_email(email) is not None:
            self._audit("register_rejected", phone_number, success=False, reason="EMAIL_ALREADY_EXISTS")
            raise ConflictError("Email already registered")

        user_id = self.id_allocator.next_user_id()
        otp = self._issue_otp(phone_number)
        self.user_repo.create(user_id=user_id, full_name=full_name, phone_number=phone_number, email=email)

        self._audit("register_otp_issued", phone_number, user_id=user_id)
        return IssuedOtp(user_id=user_id, otp=otp)

    def login(self, phone_number: Optional[str]) -> IssuedOtp:
        phone_number = _clean(phone_number)
        if not phone_number:
            raise ValidationError("Phone number is required")

        user = self.user_repo.get_by_phone(phone_number)
        if user is None:
            self._audit("login_rejected", phone_number, success=False, reason="NOT_REGISTERED")
            raise NotFoundError("Phone number not registered")

        otp = self._issue_otp(phone_number)
        self._audit("login_otp_issued", phone_number, user_id=user.user_id)
        return IssuedOtp(user_id=user.user_id, otp=otp)
