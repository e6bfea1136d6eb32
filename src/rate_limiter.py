import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from src.logger import AsyncLogger


Probe = Callable[[], Awaitable[bool]]


@dataclass(frozen=True, slots=True)
class Permit:
    slot: float
    granted_at: float


class RpcRateLimiter(AsyncLogger):
    """
    Hands out time slots for a shared RPC endpoint.

    Every call to ``acquire`` reserves the next free slot and then sleeps
    until that slot starts. A caller is also never released before the
    previous caller's permit was decided plus ``interval``, so grants stay
    in request order and at least ``interval`` seconds apart even when the
    probes take uneven time.
    """

    def __init__(self, interval: float) -> None:
        super().__init__()
        if interval < 0:
            raise ValueError("interval must be non-negative")
        self.interval = interval
        self._next_slot: float | None = None
        self._last_decision: asyncio.Future[float] | None = None

    @staticmethod
    def _now() -> float:
        return asyncio.get_running_loop().time()

    def _reserve_slot(self) -> tuple[float, asyncio.Future[float] | None, asyncio.Future[float]]:
        # No await between reading and advancing the slot.
        now = self._now()
        slot = now if self._next_slot is None else max(now, self._next_slot)
        self._next_slot = slot + self.interval

        previous = self._last_decision
        decision = asyncio.get_running_loop().create_future()
        self._last_decision = decision
        return slot, previous, decision

    async def _sleep_until(self, moment: float) -> None:
        delay = moment - self._now()
        if delay > 0:
            await asyncio.sleep(delay)

    async def _check_probe(self, probe: Probe, address: str | None) -> bool:
        try:
            available = await probe()
        except Exception as error:
            await self.logger_msg(
                f"RPC probe failed: {error}", type_msg="warning",
                address=address, method_name="acquire"
            )
            return False
        if not available:
            await self.logger_msg(
                "RPC endpoint is unavailable", type_msg="warning",
                address=address, method_name="acquire"
            )
            return False
        return True

    async def acquire(
        self,
        probe: Probe | None = None,
        address: str | None = None
    ) -> Permit | None:
        """
        Wait for a permit.

        Returns ``None`` if ``probe`` fails or reports the endpoint as
        unavailable; the reserved slot is spent either way.
        """
        slot, previous, decision = self._reserve_slot()
        try:
            await self._sleep_until(slot)
            if previous is not None:
                decided_at = await asyncio.shield(previous)
                await self._sleep_until(decided_at + self.interval)

            if probe is not None and not await self._check_probe(probe, address):
                return None
            return Permit(slot=slot, granted_at=self._now())
        finally:
            if not decision.done():
                decision.set_result(self._now())

    def reset(self) -> None:
        self._next_slot = None
        self._last_decision = None
