from typing import Protocol


class OTPGenerator(Protocol):
    def generate_otp(self) -> str:
        ...
