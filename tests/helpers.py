"""Fakes shared across the pairing tests."""

from __future__ import annotations

import asyncio
import socket
from typing import Dict, List, Optional, Union

from aiohttp import web

from discovery.models import BridgeCandidate
from discovery.network_discovery import DiscoveryProvider
from pairing.models import AttemptOutcome, AttemptResult, Credential

Step = Union[AttemptOutcome, str, Exception]


def closed_port_address() -> str:
    """Return a localhost address nothing is listening on."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"127.0.0.1:{port}"


def make_bridge_app(responses: List) -> web.Application:
    """Fake bridge answering POST /api with the given JSON bodies in turn.

    The last response repeats once the list is used up. A ``str`` entry is
    sent as a raw text body instead of JSON.
    """
    app = web.Application()
    app["requests"] = []

    async def create_user(request: web.Request) -> web.Response:
        app["requests"].append(await request.json())
        index = min(len(app["requests"]) - 1, len(responses) - 1)
        body = responses[index]
        if isinstance(body, str):
            return web.Response(text=body, content_type="text/plain")
        return web.json_response(body)

    app.router.add_post("/api", create_user)
    return app


def make_directory_app(body, status: int = 200) -> web.Application:
    """Fake discovery directory answering GET /."""
    app = web.Application()

    async def directory(request: web.Request) -> web.Response:
        if isinstance(body, str):
            return web.Response(text=body, status=status)
        return web.json_response(body, status=status)

    app.router.add_get("/", directory)
    return app


class ScriptedAuthorizer:
    """Authorizer replaying a per-address script of outcomes, one per round.

    A script entry is an AttemptOutcome, or a username string meaning the
    bridge issues that credential. The last entry repeats. ``delays`` adds a
    per-address pause before answering.
    """

    def __init__(self, scripts: Dict[str, List[Step]], delays: Optional[Dict[str, float]] = None):
        self.scripts = scripts
        self.delays = delays or {}
        self.calls: Dict[str, int] = {address: 0 for address in scripts}
        self.completed: List[str] = []
        self.cancelled: List[str] = []

    async def authorize(self, address: str) -> AttemptResult:
        index = self.calls[address]
        self.calls[address] += 1
        try:
            if self.delays.get(address):
                await asyncio.sleep(self.delays[address])
        except asyncio.CancelledError:
            self.cancelled.append(address)
            raise

        script = self.scripts[address]
        step = script[min(index, len(script) - 1)]
        self.completed.append(address)

        if isinstance(step, str):
            return AttemptResult(address, AttemptOutcome.CREDENTIAL,
                                 credential=Credential(username=step, bridge_address=address))
        if isinstance(step, Exception):
            raise step
        return AttemptResult(address, step, detail="scripted")


class RecordingStore:
    """In-memory stand-in for the credential store."""

    def __init__(self):
        self.saved: List[Credential] = []

    def save(self, credential: Credential) -> None:
        self.saved.append(credential)

    def load(self) -> Credential:
        return self.saved[-1]

    def exists(self) -> bool:
        return bool(self.saved)


class StaticProvider(DiscoveryProvider):
    """Discovery provider returning fixed addresses, or raising a given error."""

    def __init__(self, method: str, addresses: List[str], error: Optional[Exception] = None):
        self.method = method
        self.addresses = addresses
        self.error = error
        self.calls = 0

    async def discover(self) -> List[BridgeCandidate]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return [BridgeCandidate(address=address, discovery_method=self.method)
                for address in self.addresses]
