from __future__ import annotations

import asyncio
import json
import urllib.parse
import uuid
from dataclasses import dataclass, field
from typing import Any

import pytest

from pypubnub import PubnubClient, PubnubConfig, SubscriptionState
from pypubnub._crypto.signing import sign_publish

ZERO_KEY = b"\x00" * 16


@dataclass
class FakePubnubBackend:
    secret_key: str | None = "sec"
    timetoken: int = 13769501243685161
    issued_uuid: str = "6f1c2d3e-4b5a-4c6d-8e7f-901a2b3c4d5e"
    messages: dict[str, list[tuple[int, Any]]] = field(default_factory=dict)
    calls: dict[str, int] = field(default_factory=dict)
    listening: asyncio.Event = field(default_factory=asyncio.Event)
    _changed: asyncio.Condition = field(default_factory=asyncio.Condition)

    def _record_call(self, resource: str) -> None:
        self.calls[resource] = self.calls.get(resource, 0) + 1

    def _newer(self, channel: str, cursor: int) -> list[tuple[int, Any]]:
        return [entry for entry in self.messages.get(channel, []) if entry[0] > cursor]

    async def get_json(self, url: str) -> list[Any]:
        path = urllib.parse.urlsplit(url).path
        resource, *parts = [urllib.parse.unquote(part) for part in path.strip("/").split("/")]
        self._record_call(resource)

        if resource == "publish":
            pub, sub, signature, channel, _, text = parts
            return await self._publish(pub, sub, signature, channel, text)

        if resource == "subscribe":
            _, channel, _, cursor = parts
            return await self._subscribe(channel, cursor)

        if resource == "history":
            _, channel, _, limit = parts
            return [message for _, message in self.messages.get(channel, [])][-int(limit) :]

        if resource == "time":
            return [self.timetoken]

        if resource == "uuid":
            return [self.issued_uuid]

        raise AssertionError(f"Unexpected resource in fake backend: {resource}")

    async def _publish(self, pub: str, sub: str, signature: str, channel: str, text: str) -> list[Any]:
        if self.secret_key is not None and signature != sign_publish(pub, sub, self.secret_key, channel, text):
            return [0, "Invalid Signature"]
        async with self._changed:
            self.timetoken += 1
            self.messages.setdefault(channel, []).append((self.timetoken, json.loads(text)))
            self._changed.notify_all()
        return [1, "Sent", str(self.timetoken)]

    async def _subscribe(self, channel: str, cursor: str) -> list[Any]:
        if cursor == "0":
            return [[], str(self.timetoken)]
        self.listening.set()
        async with self._changed:
            await self._changed.wait_for(lambda: self._newer(channel, int(cursor)))
            newer = self._newer(channel, int(cursor))
        return [[message for _, message in newer], str(newer[-1][0])]


@pytest.fixture
def config() -> PubnubConfig:
    return PubnubConfig(
        publish_key="demo-pub",
        subscribe_key="demo-sub",
        secret_key="sec",
        cipher_key=ZERO_KEY,
        ssl=False,
        retry_backoff=0.0,
    )


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakePubnubBackend:
    fake_backend = FakePubnubBackend()

    async def fake_get_json(_self: Any, url: str) -> list[Any]:
        return await fake_backend.get_json(url)

    monkeypatch.setattr("pypubnub._transport.HttpTransport.get_json", fake_get_json)
    return fake_backend


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_publish_subscribe_history_round_trip(config: PubnubConfig, backend: FakePubnubBackend) -> None:
    received: list[Any] = []

    def on_message(message: Any) -> bool:
        received.append(message)
        return len(received) < 2

    async with PubnubClient(config) as client:
        async with client.subscribe("chat", on_message) as subscription:
            await asyncio.wait_for(backend.listening.wait(), timeout=1)

            first = await client.publish("chat", {"text": "hello ɂ顶"})
            second = await client.publish("chat", ["list", 2])
            assert first.ok and second.ok

            await asyncio.wait_for(subscription.wait(), timeout=2)

        assert received == [{"text": "hello ɂ顶"}, ["list", 2]]
        assert subscription.state is SubscriptionState.STOPPED

        history = await client.history("chat", limit=10)
        assert history == [{"text": "hello ɂ顶"}, ["list", 2]]

        assert await client.time() == backend.timetoken
        assert await client.uuid() == uuid.UUID(backend.issued_uuid)

    stored = [message for _, message in backend.messages["chat"]]
    assert all(isinstance(message, list) and len(message) == 1 for message in stored)


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_wrong_secret_is_rejected_by_backend(config: PubnubConfig, backend: FakePubnubBackend) -> None:
    backend.secret_key = "server-side-secret"

    async with PubnubClient(config) as client:
        response = await client.publish("chat", {"n": 1})

    assert response.ok is False
    assert response.message == "Invalid Signature"
    assert "chat" not in backend.messages


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_unsubscribe_while_waiting_issues_no_further_request(
    config: PubnubConfig,
    backend: FakePubnubBackend,
) -> None:
    async with PubnubClient(config) as client:
        subscription = client.subscribe("quiet", lambda _m: True)
        async with subscription:
            await asyncio.wait_for(backend.listening.wait(), timeout=1)
            subscription.unsubscribe()
            await asyncio.wait_for(subscription.wait(), timeout=1)

    assert subscription.state is SubscriptionState.STOPPED
    assert backend.calls["subscribe"] == 2
