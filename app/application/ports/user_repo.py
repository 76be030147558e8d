from typing import Protocol, Optional
from datetime import datetime

class UserDto:
    def __init__(self, user_id: int, full_name: str, phone_number: str, email: str,
                 created_at: Optional[datetime] = None):
        self.user_id = user_id
        self.full_name = full_name
        self.phone_number = phone_number
        self.email = email
        self.created_at = created_at

    def __repr__(self) -> str:
        return f"UserDto(user_id={self.user_id!r}, phone_number={self.phone_number!r})"

class UserRepository(Protocol):
    def get_by_phone(self, phone_number: str) -> Optional[UserDto]:
        ...

    def get_by_email(self, email: str) -> Optional[UserDto]:
        ...

    def create(self, user_id: int, full_name: str, phone_number: str, email: str) -> UserDto:
        ...
