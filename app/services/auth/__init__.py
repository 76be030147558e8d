from .otp_service import OTPService
from .firebase_service import (
    FirebaseInitError,
    init_firebase_app,
    get_firestore_client,
    shutdown_firebase_app,
)

__all__ = [
    "OTPService",
    "FirebaseInitError",
    "init_firebase_app",
    "get_firestore_client",
    "shutdown_firebase_app",
]
