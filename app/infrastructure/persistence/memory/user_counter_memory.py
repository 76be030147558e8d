import threading

from ....application.ports.user_id_allocator import UserIdAllocator


class InMemoryUserIdAllocator(UserIdAllocator):
    def __init__(self, last_id: int = 0) -> None:
        self.last_id = last_id
        self._lock = threading.Lock()

    def next_user_id(self) -> int:
        with self._lock:
            self.last_id += 1
            return self.last_id
