from typing import Optional
import logging

import firebase_admin
from firebase_admin import credentials, firestore

from app.core.config import Settings, settings as default_settings


logger = logging.getLogger(__name__)

# Apps created by init_firebase_app; an app initialised elsewhere is never deleted here
_owned_apps = []


class FirebaseInitError(RuntimeError):
    pass


def init_firebase_app(config: Optional[Settings] = None) -> "firebase_admin.App":
    """Initialise the process-wide Firebase app from service-account settings.

    Returns the already-initialised default app when called more than once.
    """
    config = config or default_settings
    if firebase_admin._apps:  # type: ignore[attr-defined]
        return firebase_admin.get_app()
    if not config.firebase_configured:
        raise FirebaseInitError(
            "Firebase credentials are not configured "
            "(FIREBASE_PROJECT_ID, FIREBASE_CLIENT_EMAIL, FIREBASE_PRIVATE_KEY)"
        )
    try:
        cred = credentials.Certificate({
            "type": "service_account",
            "project_id": config.FIREBASE_PROJECT_ID,
            "private_key": config.firebase_private_key,
            "client_email": config.FIREBASE_CLIENT_EMAIL,
            "token_uri": "https://oauth2.googleapis.com/token",
        })
        app = firebase_admin.initialize_app(cred, {"projectId": config.FIREBASE_PROJECT_ID})
    except ValueError as e:
        logger.error(f"Failed to initialize Firebase Admin SDK: {e}")
        raise FirebaseInitError("Firebase initialization failed") from e
    _owned_apps.append(app)
    logger.info("Firebase Admin SDK initialized successfully")
    return app


def get_firestore_client(app: "firebase_admin.App"):
    return firestore.client(app=app)


def shutdown_firebase_app(app: Optional["firebase_admin.App"]) -> None:
    if app is None:
        return
    if app not in _owned_apps:
        logger.info("Leaving externally initialised Firebase app in place")
        return
    _owned_apps.remove(app)
    firebase_admin.delete_app(app)
    logger.info("Firebase app deleted")
