import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPIError

from ....application.ports.verification_repo import VerificationRepository, PendingVerification
from ....exceptions import StoreError

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FirestoreVerificationRepository(VerificationRepository):
    """Pending OTPs live at ``pendingVerifications/{phoneNumber}``; one document per phone."""

    def __init__(self, client, collection: str = "pendingVerifications", ttl_seconds: int = 600,
                 clock: Callable[[], datetime] = utcnow):
        self.client = client
        self.collection = collection
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    def store_otp(self, phone_number: str, otp: str) -> None:
        expires_at = self.clock() + timedelta(seconds=self.ttl_seconds)
        try:
            self.client.collection(self.collection).document(phone_number).set({
                "otp": otp,
                "expiresAt": expires_at,
                "createdAt": firestore.SERVER_TIMESTAMP,
            })
        except GoogleAPIError as e:
            raise StoreError("Failed to store OTP", details=str(e)) from e

    def get(self, phone_number: str) -> Optional[PendingVerification]:
        try:
            snapshot = self.client.collection(self.collection).document(phone_number).get()
        except GoogleAPIError as e:
            raise StoreError("Failed to read pending verification", details=str(e)) from e
        if not snapshot.exists:
            return None
        data = snapshot.to_dict()
        return PendingVerification(
            phone_number=phone_number,
            otp=data["otp"],
            expires_at=data["expiresAt"],
            created_at=data.get("createdAt"),
        )
