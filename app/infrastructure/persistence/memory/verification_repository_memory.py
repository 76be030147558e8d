import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from ....application.ports.verification_repo import VerificationRepository, PendingVerification


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryVerificationRepository(VerificationRepository):
    def __init__(self, ttl_seconds: int = 600, clock: Callable[[], datetime] = utcnow) -> None:
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._pending: Dict[str, PendingVerification] = {}
        self._lock = threading.Lock()

    def store_otp(self, phone_number: str, otp: str) -> None:
        now = self.clock()
        record = PendingVerification(
            phone_number=phone_number,
            otp=otp,
            expires_at=now + timedelta(seconds=self.ttl_seconds),
            created_at=now,
        )
        with self._lock:
            self._pending[phone_number] = record

    def get(self, phone_number: str) -> Optional[PendingVerification]:
        with self._lock:
            return self._pending.get(phone_number)

    def __len__(self) -> int:
        return len(self._pending)
