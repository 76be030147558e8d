from app.core.config import Settings


def test_defaults():
    s = Settings()
    assert s.OTP_EXPIRY_SECONDS == 600
    assert s.USERS_COLLECTION == "users"
    assert s.PENDING_VERIFICATIONS_COLLECTION == "pendingVerifications"
    assert s.allowed_origins_list == ["*"]


def test_private_key_newlines_are_decoded():
    s = Settings(FIREBASE_PRIVATE_KEY="-----BEGIN-----\\nabc\\n-----END-----")
    assert s.firebase_private_key == "-----BEGIN-----\nabc\n-----END-----"


def test_firebase_configured_requires_all_credentials(monkeypatch):
    for name in ("FIREBASE_PROJECT_ID", "FIREBASE_CLIENT_EMAIL", "FIREBASE_PRIVATE_KEY"):
        monkeypatch.delenv(name, raising=False)
    assert Settings(FIREBASE_PROJECT_ID="p", FIREBASE_CLIENT_EMAIL="e").firebase_configured is False
    assert Settings(FIREBASE_PROJECT_ID="p", FIREBASE_CLIENT_EMAIL="e", FIREBASE_PRIVATE_KEY="k").firebase_configured is True


def test_allowed_origins_csv(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
    assert Settings().allowed_origins_list == ["https://a.example", "https://b.example"]
