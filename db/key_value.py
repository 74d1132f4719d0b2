"""
Key-value stores backed by SQLModel tables.

KeyValueStore holds non-sensitive data (history log, profile, first-launch
flag). SecureKeyValueStore holds credentials and the session, encrypted with
AES-GCM before they touch the database.

Both expose the same async surface (get/set/remove/clear). Queries run on the
threadpool so callers on the event loop never block on the database. Any
database or decryption error is raised as StorageFailureError.
"""
import base64
import logging
import os
import uuid
from pathlib import Path
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from db.models import SecureValue, StoredValue, utcnow
from services.errors import StorageFailureError

logger = logging.getLogger(__name__)

NONCE_SIZE = 12


class KeyValueStore:
    table = StoredValue

    def __init__(self, engine):
        self.engine = engine

    async def get(self, key: str) -> Optional[str]:
        row = await self._run(self._get_row, key)
        return None if row is None else self._decode(row)

    async def set(self, key: str, value: str) -> None:
        await self._run(self._set_row, key, self._encode(value))

    async def remove(self, key: str) -> None:
        await self._run(self._remove_row, key)

    async def clear(self) -> None:
        await self._run(self._clear_rows)

    # --- row encoding, overridden by the secure store ---
    def _encode(self, value: str) -> dict:
        return {"value": value}

    def _decode(self, row) -> str:
        return row.value

    # --- blocking helpers (threadpool) ---
    def _get_row(self, key: str):
        with Session(self.engine) as session:
            return session.get(self.table, key)

    def _set_row(self, key: str, fields: dict) -> None:
        with Session(self.engine) as session:
            row = session.get(self.table, key)
            if row is None:
                row = self.table(key=key, **fields)
            else:
                for name, value in fields.items():
                    setattr(row, name, value)
                row.updated_at = utcnow()
            session.add(row)
            session.commit()

    def _remove_row(self, key: str) -> None:
        with Session(self.engine) as session:
            row = session.get(self.table, key)
            if row is not None:
                session.delete(row)
                session.commit()

    def _clear_rows(self) -> None:
        with Session(self.engine) as session:
            for row in session.exec(select(self.table)).all():
                session.delete(row)
            session.commit()

    async def _run(self, func, *args):
        try:
            return await run_in_threadpool(func, *args)
        except SQLAlchemyError as e:
            raise StorageFailureError(f"{self.table.__name__} {func.__name__.strip('_')} failed: {e}") from e


class SecureKeyValueStore(KeyValueStore):
    table = SecureValue

    def __init__(self, engine, key: bytes):
        super().__init__(engine)
        if len(key) != 32:
            raise ValueError("secure store key must be 32 bytes")
        self._aes = AESGCM(key)

    def _encode(self, value: str) -> dict:
        nonce = os.urandom(NONCE_SIZE)
        sealed = nonce + self._aes.encrypt(nonce, value.encode("utf-8"), None)
        return {"ciphertext": base64.b64encode(sealed).decode("ascii")}

    def _decode(self, row) -> str:
        try:
            data = base64.b64decode(row.ciphertext)
            if len(data) < NONCE_SIZE:
                raise InvalidTag("ciphertext too short")
            nonce, ct = data[:NONCE_SIZE], data[NONCE_SIZE:]
            return self._aes.decrypt(nonce, ct, None).decode("utf-8")
        except (InvalidTag, ValueError) as e:
            raise StorageFailureError(f"could not decrypt secure value '{row.key}'") from e


def load_or_create_key(encoded_key: Optional[str], key_path: Path) -> bytes:
    """
    Resolve the 32-byte secure store key.

    An explicit urlsafe-base64 key wins. Otherwise the key file is read, and
    created with a fresh random key the first time.
    """
    if encoded_key:
        return base64.urlsafe_b64decode(encoded_key)

    if key_path.exists():
        data = key_path.read_bytes()
        if len(data) >= 32:
            return data[:32]
        logger.warning("Secure key file %s is truncated; generating a new key", key_path)

    key = AESGCM.generate_key(bit_length=256)
    key_path.parent.mkdir(parents=True, exist_ok=True)
    tmp = key_path.with_suffix(key_path.suffix + f".tmp.{uuid.uuid4().hex}")
    tmp.write_bytes(key)
    tmp.replace(key_path)
    logger.info("Secure store key created at %s", key_path)
    return key
