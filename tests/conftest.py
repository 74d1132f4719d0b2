import asyncio
from types import SimpleNamespace

import pytest
from sqlalchemy.pool import StaticPool

from db.database import init_db, make_engine
from services.errors import StorageFailureError


class FakeConnectivity:
    def __init__(self, connected: bool = True):
        self.connected = connected
        self.calls = 0

    async def check_connected(self) -> bool:
        self.calls += 1
        return self.connected


class FakeResponse:
    def __init__(self, text, sources=()):
        self.text = text
        chunks = [SimpleNamespace(web=SimpleNamespace(uri=uri, title=uri)) for uri in sources]
        self.candidates = [SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=chunks))]


class FakeGeminiClient:
    """Stands in for genai.Client; only client.aio.models.generate_content is used."""

    def __init__(self, text=None, error=None, sources=()):
        self.text = text
        self.error = error
        self.sources = sources
        self.calls = []
        self.aio = SimpleNamespace(models=SimpleNamespace(generate_content=self._generate_content))

    async def _generate_content(self, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.text, self.sources)


class MemoryStore:
    """Async dict store. Every operation yields to the loop once, like a real backend."""

    def __init__(self):
        self.data = {}

    async def get(self, key):
        await asyncio.sleep(0)
        return self.data.get(key)

    async def set(self, key, value):
        await asyncio.sleep(0)
        self.data[key] = value

    async def remove(self, key):
        await asyncio.sleep(0)
        self.data.pop(key, None)

    async def clear(self):
        await asyncio.sleep(0)
        self.data.clear()


class BrokenStore:
    async def get(self, key):
        raise StorageFailureError("disk unavailable")

    async def set(self, key, value):
        raise StorageFailureError("disk unavailable")

    async def remove(self, key):
        raise StorageFailureError("disk unavailable")

    async def clear(self):
        raise StorageFailureError("disk unavailable")


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def engine():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def memory_store():
    return MemoryStore()
