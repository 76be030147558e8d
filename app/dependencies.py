import logging
from typing import Optional

from fastapi import Request

from .core.config import Settings
from .exceptions import StoreError
from .application.services.auth_service import AuthService
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.persistence.firestore.user_repository_firestore import FirestoreUserRepository
from .infrastructure.persistence.firestore.verification_repository_firestore import FirestoreVerificationRepository
from .infrastructure.persistence.firestore.user_counter_firestore import FirestoreUserIdAllocator
from .infrastructure.persistence.memory.user_repository_memory import InMemoryUserRepository
from .infrastructure.persistence.memory.verification_repository_memory import InMemoryVerificationRepository
from .infrastructure.persistence.memory.user_counter_memory import InMemoryUserIdAllocator
from .services.auth.otp_service import OTPService

logger = logging.getLogger(__name__)


def build_firestore_auth_service(client, config: Settings) -> AuthService:
    return AuthService(
        user_repo=FirestoreUserRepository(client, collection=config.USERS_COLLECTION),
        verification_repo=FirestoreVerificationRepository(
            client,
            collection=config.PENDING_VERIFICATIONS_COLLECTION,
            ttl_seconds=config.OTP_EXPIRY_SECONDS,
        ),
        id_allocator=FirestoreUserIdAllocator(
            client,
            collection=config.METADATA_COLLECTION,
            document=config.USER_COUNTER_DOCUMENT,
            max_attempts=config.FIRESTORE_TRANSACTION_MAX_ATTEMPTS,
        ),
        otp_generator=OTPService(),
        audit=StdAuditLogger(),
    )


def build_memory_auth_service(config: Settings) -> AuthService:
    return AuthService(
        user_repo=InMemoryUserRepository(),
        verification_repo=InMemoryVerificationRepository(ttl_seconds=config.OTP_EXPIRY_SECONDS),
        id_allocator=InMemoryUserIdAllocator(),
        otp_generator=OTPService(),
        audit=StdAuditLogger(),
    )


def get_auth_service(request: Request) -> AuthService:
    service: Optional[AuthService] = getattr(request.app.state, "auth_service", None)
    if service is None:
        logger.error(f"Credential store unavailable: {getattr(request.app.state, 'store_init_error', None)}")
        raise StoreError("Credential store is not initialised")
    return service
