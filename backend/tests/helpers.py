# backend/tests/helpers.py

import asyncio

import jwt

from switchboard.core.config import settings

TEST_SECRET = "test-secret"


def make_token(user_id: str, secret: str = TEST_SECRET, **claims) -> str:
    return jwt.encode({"id": user_id, **claims}, secret, algorithm=settings.jwt_algorithm)


def cookie_header(user_id: str) -> dict:
    return {"cookie": f"{settings.auth_cookie_name}={make_token(user_id)}"}


class FakeConnection:
    """Stands in for a WebSocket: records pushed frames, optionally fails."""

    def __init__(self, fail: bool = False) -> None:
        self.sent = []
        self.fail = fail

    async def send_json(self, data) -> None:
        if self.fail:
            raise ConnectionError("socket closed")
        self.sent.append(data)


class StalledConnection:
    """A socket stuck under backpressure: its send never completes."""

    def __init__(self) -> None:
        self.attempts = 0

    async def send_json(self, data) -> None:
        self.attempts += 1
        await asyncio.Event().wait()
