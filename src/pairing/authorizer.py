"""
Single authorization attempt against one bridge
"""

import asyncio
import logging
from typing import Any

import aiohttp

from http_helper import create_bridge_session
from .models import Credential, AttemptOutcome, AttemptResult

logger = logging.getLogger(__name__)


class BridgeAuthorizer:
    """Sends the pairing request to a bridge and classifies the answer

    Every call opens its own session, so any number of attempts can run
    concurrently without sharing state.
    """

    def __init__(self, config: dict):
        self.devicetype = config.get('devicetype', 'rue_pc_app')
        self.request_timeout = config.get('request_timeout', 4)

    async def authorize(self, address: str) -> AttemptResult:
        """POST the pairing request to http://<address>/api"""
        url = f"http://{address}/api"
        try:
            async with create_bridge_session(self.request_timeout) as session:
                async with session.post(url, json={"devicetype": self.devicetype}) as response:
                    if response.status != 200:
                        logger.debug(f"HTTP {response.status} from {url}")
                    payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            logger.debug(f"Bridge {address} unreachable: {e!r}")
            return AttemptResult(address, AttemptOutcome.UNREACHABLE, detail=repr(e))
        except ValueError as e:
            logger.debug(f"Bridge {address} sent invalid JSON: {e}")
            return AttemptResult(address, AttemptOutcome.MALFORMED, detail=str(e))

        return self.parse_response(address, payload)

    def parse_response(self, address: str, payload: Any) -> AttemptResult:
        """
        Classify a pairing response
        Expected shape: [{"success": {"username": "..."}}] or [{"error": {...}}]
        """
        if not isinstance(payload, list) or not payload or not isinstance(payload[0], dict):
            return AttemptResult(address, AttemptOutcome.MALFORMED,
                                 detail=f"unexpected response: {payload!r}")

        message = payload[0]

        if 'success' in message:
            success = message['success']
            username = success.get('username') if isinstance(success, dict) else None
            if not isinstance(username, str) or not username:
                return AttemptResult(address, AttemptOutcome.MALFORMED,
                                     detail=f"success without username: {success!r}")
            return AttemptResult(address, AttemptOutcome.CREDENTIAL,
                                 credential=Credential(username=username, bridge_address=address))

        if 'error' in message:
            error = message['error']
            description = error.get('description') if isinstance(error, dict) else None
            return AttemptResult(address, AttemptOutcome.REJECTED,
                                 detail=description or repr(error))

        return AttemptResult(address, AttemptOutcome.MALFORMED,
                             detail=f"neither success nor error in {message!r}")
