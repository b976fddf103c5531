"""
Polling coordinator: repeated concurrent pairing rounds across all candidates
"""

import asyncio
import logging
import time
from collections import Counter
from typing import Awaitable, Callable, Iterable, List, Optional, Tuple

from errors import NoCandidatesError, NoCredentialError
from .authorizer import BridgeAuthorizer
from .models import Credential, AttemptOutcome, AttemptResult

logger = logging.getLogger(__name__)

RoundCallback = Callable[[int, int, List[AttemptResult]], Awaitable[None]]


class PairingCoordinator:
    """
    Polls every candidate bridge in rounds until one issues a credential

    Each round fans out one attempt per candidate and watches them in
    completion order. The first credential fulfils a one-shot future and ends
    the run; a credential arriving after that finds the future already done
    and is dropped. When several bridges succeed in the same round the first
    to complete wins, and that order is not deterministic.

    Rounds never overlap: the delay and the next fan-out start only after the
    previous round has resolved.
    """

    def __init__(self, authorizer: BridgeAuthorizer, store=None, max_rounds: int = 24,
                 retry_delay: float = 5, cancel_stragglers: bool = True):
        self.authorizer = authorizer
        self.store = store
        self.max_rounds = max_rounds
        self.retry_delay = retry_delay
        self.cancel_stragglers = cancel_stragglers
        self._stragglers = set()

    @classmethod
    def from_config(cls, config: dict, store=None, authorizer: Optional[BridgeAuthorizer] = None):
        return cls(
            authorizer or BridgeAuthorizer(config),
            store=store,
            max_rounds=config.get('max_rounds', 24),
            retry_delay=config.get('retry_delay_seconds', 5),
            cancel_stragglers=config.get('cancel_stragglers', True),
        )

    async def run(self, addresses: Iterable[str], on_round: Optional[RoundCallback] = None) -> Credential:
        """
        Poll until a bridge grants a credential or the round budget runs out

        Raises NoCandidatesError for an empty address list and NoCredentialError
        once every round has been exhausted. The credential is saved through the
        store (when one is set) before it is returned.
        """
        addresses = list(addresses)
        if not addresses:
            raise NoCandidatesError()

        logger.info(f"[PAIRING] Polling {len(addresses)} bridge(s) for up to {self.max_rounds} rounds "
                    f"every {self.retry_delay}s - press the link button on the bridge")
        start_time = time.time()

        for round_number in range(1, self.max_rounds + 1):
            credential, results = await self._run_round(addresses, round_number)

            if credential is not None:
                logger.info(f"[PAIRING] Bridge {credential.bridge_address} issued a credential "
                            f"in round {round_number} ({time.time() - start_time:.1f}s)")
                if self.store is not None:
                    self.store.save(credential)
                return credential

            if on_round is not None:
                await on_round(round_number, self.max_rounds, results)

            if round_number < self.max_rounds:
                await asyncio.sleep(self.retry_delay)

        logger.warning(f"[PAIRING] No credential after {self.max_rounds} rounds "
                       f"({time.time() - start_time:.1f}s)")
        raise NoCredentialError()

    async def _run_round(self, addresses: List[str],
                         round_number: int) -> Tuple[Optional[Credential], List[AttemptResult]]:
        """Fan out one attempt per address and stop at the first credential"""
        winner = asyncio.get_running_loop().create_future()

        async def attempt(address: str) -> AttemptResult:
            try:
                result = await self.authorizer.authorize(address)
            except Exception as e:
                logger.error(f"Authorization attempt against {address} failed: {e!r}")
                result = AttemptResult(address, AttemptOutcome.UNREACHABLE, detail=repr(e))

            if result.succeeded:
                if winner.done():
                    logger.info(f"Discarding late credential from {address}")
                else:
                    winner.set_result(result.credential)
            else:
                logger.debug(f"Round {round_number}: {address} {result.outcome.value} ({result.detail})")
            return result

        round_done = asyncio.gather(*(attempt(address) for address in addresses))
        try:
            await asyncio.wait({winner, round_done}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            round_done.cancel()
            raise

        if winner.done():
            if not round_done.done():
                if self.cancel_stragglers:
                    round_done.cancel()
                else:
                    # Keep a reference so unfinished attempts are not garbage collected mid-flight
                    self._stragglers.add(round_done)
                    round_done.add_done_callback(self._stragglers.discard)
            return winner.result(), []

        winner.cancel()
        results = round_done.result()
        self._log_round(round_number, results)
        return None, results

    def _log_round(self, round_number: int, results: List[AttemptResult]) -> None:
        counts = Counter(result.outcome.value for result in results)
        summary = ", ".join(f"{count} {outcome}" for outcome, count in sorted(counts.items()))
        logger.info(f"[PAIRING] Round {round_number}/{self.max_rounds}: no credential ({summary})")
