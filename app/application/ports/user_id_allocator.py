from typing import Protocol


class UserIdAllocator(Protocol):
    def next_user_id(self) -> int:
        """Atomically bump the user counter and return the new value (first id is 1)."""
        ...
