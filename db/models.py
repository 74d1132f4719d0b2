from sqlmodel import SQLModel, Field
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# -------------------
# GENERAL KEY-VALUE STORE
# -------------------
class StoredValue(SQLModel, table=True):
    key: str = Field(primary_key=True)
    value: str  # JSON text or plain string
    updated_at: datetime = Field(default_factory=utcnow)


# -------------------
# SECURE KEY-VALUE STORE
# -------------------
class SecureValue(SQLModel, table=True):
    key: str = Field(primary_key=True)
    ciphertext: str  # base64(nonce + AES-GCM ciphertext)
    updated_at: datetime = Field(default_factory=utcnow)
