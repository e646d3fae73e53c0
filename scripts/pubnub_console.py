#!/usr/bin/env python3
"""Talk to a PubNub account from the command line.

Publishes, subscribes, reads history and queries server time/UUID with
pypubnub, printing each reply as JSON. Handy for checking keys, cipher
settings and signatures against a live account.

Usage
-----
Set environment variables and run::

    export PUBNUB_PUBLISH_KEY="demo"
    export PUBNUB_SUBSCRIBE_KEY="demo"
    python scripts/pubnub_console.py publish my_channel '{"text": "hi"}'
    python scripts/pubnub_console.py subscribe my_channel --count 5

Commands::

    publish CHANNEL JSON      Publish one message
    subscribe CHANNEL         Print messages until Ctrl-C (or --count)
    history CHANNEL           Print recent messages (--limit N)
    time                      Print the server time token
    uuid                      Print a server-issued UUID
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pypubnub import PubnubClient, PubnubConfig, PubnubError  # noqa: E402


def _print_json(value: Any) -> None:
    print(json.dumps(value, indent=2, default=str, ensure_ascii=False))


async def _subscribe(client: PubnubClient, channel: str, count: int | None) -> None:
    received = 0

    def on_message(message: Any) -> bool:
        nonlocal received
        received += 1
        _print_json(message)
        return count is None or received < count

    async with client.subscribe(channel, on_message) as subscription:
        print(f"Listening on {channel!r} (Ctrl-C to stop)", file=sys.stderr)
        with contextlib.suppress(asyncio.CancelledError):
            await subscription.wait()
        print(f"Stopped at cursor {subscription.cursor}", file=sys.stderr)


async def run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.cipher_key:
        overrides["cipher_key"] = args.cipher_key
    if args.no_ssl:
        overrides["ssl"] = False
    config = PubnubConfig.from_env(**overrides)

    async with PubnubClient(config) as client:
        if args.command == "publish":
            message = json.loads(args.message)
            response = await client.publish(args.channel, message)
            _print_json(response.raw)
            return 0 if response.ok else 1
        if args.command == "subscribe":
            await _subscribe(client, args.channel, args.count)
            return 0
        if args.command == "history":
            _print_json(await client.history(args.channel, args.limit))
            return 0
        if args.command == "time":
            print(await client.time())
            return 0
        if args.command == "uuid":
            print(await client.uuid())
            return 0
    return 2


def main() -> None:
    parser = argparse.ArgumentParser(description="PubNub command-line console.")
    parser.add_argument("--cipher-key", help="Hex AES-128 key (overrides PUBNUB_CIPHER_KEY)")
    parser.add_argument("--no-ssl", action="store_true", help="Use plain http")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_publish = sub.add_parser("publish", help="Publish one message")
    p_publish.add_argument("channel")
    p_publish.add_argument("message", help="Message as JSON text")

    p_subscribe = sub.add_parser("subscribe", help="Print messages as they arrive")
    p_subscribe.add_argument("channel")
    p_subscribe.add_argument("--count", type=int, help="Stop after this many messages")

    p_history = sub.add_parser("history", help="Print recent messages")
    p_history.add_argument("channel")
    p_history.add_argument("--limit", type=int, default=10)

    sub.add_parser("time", help="Print the server time token")
    sub.add_parser("uuid", help="Print a server-issued UUID")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        sys.exit(130)
    except (PubnubError, json.JSONDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
