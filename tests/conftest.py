import asyncio
import json
import os

# Minimal values for tests
os.environ.setdefault("PROXIMITY_API_KEY", "test-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from httpx import ASGITransport  # noqa: E402
from httpx import AsyncClient  # noqa: E402
import pytest  # noqa: E402

from proximity.app import app  # noqa: E402
from proximity.broadcaster import Broadcaster  # noqa: E402
from proximity.deps import get_broadcaster  # noqa: E402
from proximity.settings import settings  # noqa: E402

API_KEY = settings.api_key


@pytest.fixture
def broadcaster():
    b = Broadcaster(queue_size=100)
    yield b
    b.close()


# ---- Override the lifespan-owned broadcaster so routes use the fixture ----
@pytest.fixture(autouse=True)
def override_broadcaster(broadcaster):
    app.dependency_overrides[get_broadcaster] = lambda: broadcaster
    yield
    app.dependency_overrides.pop(get_broadcaster, None)


# ---- HTTP clients bound to the ASGI app ----
@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://testserver", headers={"X-API-Key": API_KEY}
    ) as ac:
        yield ac


@pytest.fixture
async def anonymous_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


# ---- SSE helpers ----
@pytest.fixture
def parse_sse():
    """Splits an event-stream body into (event, data) pairs, skipping comments."""

    def _parse(body):
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        frames = []
        for block in body.split("\n\n"):
            lines = [ln for ln in block.splitlines() if ln and not ln.startswith(":")]
            if not lines:
                continue
            event = next((ln[len("event: "):] for ln in lines if ln.startswith("event: ")), None)
            data = "\n".join(ln[len("data: "):] for ln in lines if ln.startswith("data: "))
            frames.append((event, json.loads(data)))
        return frames

    return _parse


@pytest.fixture
def wait_for_subscribers(broadcaster):
    async def _wait(channel_id, count, timeout=2.0):
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while True:
            counts = {c.channel_id: c.subscriber_count for c in broadcaster.channels()}
            if counts.get(channel_id, 0) >= count:
                return
            if loop.time() > deadline:
                raise AssertionError(f"{channel_id!r} never reached {count} subscriber(s): {counts}")
            await asyncio.sleep(0.01)

    return _wait
