import asyncio
from types import SimpleNamespace

import pytest

from src.models import TaskOptions, WalletData
from src.task_runner import TaskObserver


class FakeExecutor:
    """Counts ``execute`` calls; raises on the ``fail_on``-th call (1-indexed)."""

    def __init__(
        self,
        fail_on: int | None = None,
        error: Exception | None = None,
        delay: float = 0,
        tracker: "ConcurrencyTracker | None" = None
    ) -> None:
        self.fail_on = fail_on
        self.error = error or RuntimeError("execution reverted")
        self.delay = delay
        self.tracker = tracker
        self.calls = 0
        self.entered = False
        self.exited = False

    async def __aenter__(self) -> "FakeExecutor":
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.exited = True

    async def execute(self) -> str:
        self.calls += 1
        if self.tracker:
            self.tracker.enter()
        try:
            await asyncio.sleep(self.delay)
            if self.fail_on is not None and self.calls == self.fail_on:
                raise self.error
            return f"0x{self.calls:064x}"
        finally:
            if self.tracker:
                self.tracker.exit()


class ConcurrencyTracker:
    def __init__(self) -> None:
        self.current = 0
        self.peak = 0

    def enter(self) -> None:
        self.current += 1
        self.peak = max(self.peak, self.current)

    def exit(self) -> None:
        self.current -= 1


class RecordingObserver(TaskObserver):
    def __init__(self) -> None:
        self.events: list[tuple] = []

    def on_init(self, total: int) -> None:
        self.events.append(("init", total))

    def on_progress(self, progress: int) -> None:
        self.events.append(("progress", progress))

    def on_success(self) -> None:
        self.events.append(("success",))

    def on_fail(self, error: Exception) -> None:
        self.events.append(("fail", error))

    def count(self, event: str) -> int:
        return sum(1 for item in self.events if item[0] == event)


def make_wallet(address: str, name: str | None = None) -> WalletData:
    return WalletData(name=name, address=address, privateKey="0x" + "11" * 32)


@pytest.fixture
def wallet() -> WalletData:
    return make_wallet("0xAA00000000000000000000000000000000001111", name="main")


@pytest.fixture
def wallets() -> list[WalletData]:
    return [
        make_wallet("0xAA00000000000000000000000000000000001111", name="first"),
        make_wallet("0xBB00000000000000000000000000000000002222", name="second"),
        make_wallet("0xCC00000000000000000000000000000000003333", name="third"),
    ]


@pytest.fixture
def options_factory():
    def factory(units: int, gas: str = "0.23") -> TaskOptions:
        return TaskOptions(number_of_units=units, gas_price_gwei=gas)
    return factory


TX_HASH = bytes.fromhex("ab" * 32)


class FakeSigner:
    """Stands in for the wallet's LocalAccount; records what was signed."""

    def __init__(self, address: str) -> None:
        self.address = address
        self.signed: list[dict] = []

    def sign_transaction(self, transaction: dict):
        self.signed.append(dict(transaction))
        return SimpleNamespace(raw_transaction=b"\x01signed")


class FakeEth:
    def __init__(
        self,
        send_errors: list[Exception] | None = None,
        receipt_status: int = 1,
        receipt_error: Exception | None = None,
        nonce: int = 0
    ) -> None:
        self.send_errors = list(send_errors or [])
        self.receipt_status = receipt_status
        self.receipt_error = receipt_error
        self.nonce = nonce
        self.sent: list[bytes] = []

    async def get_transaction_count(self, address, block_identifier) -> int:
        return self.nonce

    async def send_raw_transaction(self, raw_transaction: bytes) -> bytes:
        if self.send_errors:
            raise self.send_errors.pop(0)
        self.sent.append(raw_transaction)
        return TX_HASH

    async def wait_for_transaction_receipt(self, tx_hash: bytes, timeout: float) -> dict:
        if self.receipt_error:
            raise self.receipt_error
        return {"status": self.receipt_status, "transactionHash": tx_hash}


class FakeContractFunction:
    def __init__(self, estimate: int = 21_000, estimate_error: Exception | None = None) -> None:
        self.estimate = estimate
        self.estimate_error = estimate_error
        self.built: dict | None = None

    async def estimate_gas(self, params: dict) -> int:
        if self.estimate_error:
            raise self.estimate_error
        return self.estimate

    async def build_transaction(self, params: dict) -> dict:
        self.built = {**params, "to": "0x4D1E2145082d0AB0fDa4a973dC4887C7295e21aB", "data": "0x632a9a52"}
        return dict(self.built)
