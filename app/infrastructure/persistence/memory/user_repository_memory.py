import threading
from datetime import datetime, timezone
from typing import Dict, Optional

from ....application.ports.user_repo import UserRepository, UserDto


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: Dict[int, UserDto] = {}
        self._lock = threading.Lock()

    def get_by_phone(self, phone_number: str) -> Optional[UserDto]:
        with self._lock:
            return next((u for u in self._users.values() if u.phone_number == phone_number), None)

    def get_by_email(self, email: str) -> Optional[UserDto]:
        with self._lock:
            return next((u for u in self._users.values() if u.email == email), None)

    def create(self, user_id: int, full_name: str, phone_number: str, email: str) -> UserDto:
        user = UserDto(
            user_id=user_id,
            full_name=full_name,
            phone_number=phone_number,
            email=email,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._users[user_id] = user
        return user
