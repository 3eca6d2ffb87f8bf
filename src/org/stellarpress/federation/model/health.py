import asyncio


class HealthGauge:
    """
    Fault counter backing the readiness probe.

    Every directory fault seen while answering a request adds to the gauge, and a
    background task drains it by one per tick. A burst of faults that outpaces
    the drain pushes the gauge past ``fault_threshold`` and the readiness probe
    starts failing until the service recovers.
    """

    def __init__(self, faults: int = 0, fault_threshold: int = 25) -> None:
        self._faults = faults
        self._fault_threshold = fault_threshold
        self._lock = asyncio.Lock()

    async def record_fault(self, weight: int = 1) -> int:
        async with self._lock:
            self._faults += int(weight)
            return self._faults

    async def drain(self) -> None:
        async with self._lock:
            if self._faults > 0:
                self._faults -= 1

    async def is_healthy(self) -> bool:
        async with self._lock:
            return self._faults <= self._fault_threshold
