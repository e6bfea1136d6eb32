import asyncio
from contextlib import AbstractAsyncContextManager, nullcontext
from typing import Any, Callable, Protocol

from src.exceptions.custom_exceptions import BotError, UnknownTaskError
from src.logger import AsyncLogger
from src.models import TaskOptions, TaskReport, TaskState, WalletData


class WorkUnitExecutor(Protocol):
    async def execute(self) -> Any: ...


ExecutorFactory = Callable[
    [WalletData, TaskOptions], AbstractAsyncContextManager[WorkUnitExecutor]
]


class TaskObserver:
    """
    Receives the live events of one runner.

    ``on_init`` fires once, ``on_progress`` once per completed unit, then
    exactly one of ``on_success`` / ``on_fail``. The default
    implementation ignores everything.
    """

    def on_init(self, total: int) -> None:
        pass

    def on_progress(self, progress: int) -> None:
        pass

    def on_success(self) -> None:
        pass

    def on_fail(self, error: Exception) -> None:
        pass


def normalize_error(error: Exception) -> BotError:
    if isinstance(error, BotError):
        return error
    wrapped = UnknownTaskError(f"Unknown error: {type(error).__name__}: {error}")
    wrapped.__cause__ = error
    return wrapped


class TaskRunner(AsyncLogger):
    """
    Runs the units of one wallet strictly one after another.

    The first unit that raises stops the loop; remaining units are never
    started and the runner finishes as failed. Units are not retried.
    """

    def __init__(
        self,
        wallet: WalletData,
        options: TaskOptions,
        executor_factory: ExecutorFactory,
        observer: TaskObserver | None = None,
        unit_gate: asyncio.Semaphore | None = None
    ) -> None:
        super().__init__()
        self.wallet = wallet
        self.options = options
        self.executor_factory = executor_factory
        self.observer = observer or TaskObserver()
        self.unit_gate = unit_gate
        self.report = TaskReport(address=wallet.address, name=wallet.name)

    @property
    def state(self) -> TaskState:
        return self.report.state

    async def _notify(self, event: str, *args: Any) -> None:
        try:
            getattr(self.observer, event)(*args)
        except Exception as error:
            await self.logger_msg(
                f"Observer {event} raised {type(error).__name__}: {error}",
                type_msg="warning", address=self.wallet.address,
                method_name="_notify"
            )

    async def _initialize(self) -> None:
        if self.report.state is not TaskState.IDLE:
            raise RuntimeError(f"Runner for {self.wallet.address} already started")
        self.report.total = self.options.number_of_units
        self.report.state = TaskState.INITIALIZED
        await self._notify("on_init", self.report.total)

    async def _succeed(self) -> None:
        self.report.success = True
        self.report.state = TaskState.SUCCEEDED
        await self.logger_msg(
            f"Completed {self.report.progress}/{self.report.total} votes",
            type_msg="success", address=self.wallet.address,
            account_name=self.wallet.name
        )
        await self._notify("on_success")

    async def _fail(self, error: Exception) -> None:
        self.report.success = False
        self.report.error = normalize_error(error)
        self.report.state = TaskState.FAILED
        await self.logger_msg(
            f"Stopped at {self.report.progress}/{self.report.total}: {self.report.error}",
            type_msg="error", address=self.wallet.address,
            account_name=self.wallet.name, method_name="run"
        )
        await self._notify("on_fail", self.report.error)

    async def _execute_unit(self, executor: WorkUnitExecutor) -> None:
        async with self.unit_gate or nullcontext():
            await executor.execute()

    async def run(self) -> TaskReport:
        await self._initialize()
        total = self.options.number_of_units

        try:
            if total > 0:
                async with self.executor_factory(self.wallet, self.options) as executor:
                    for _ in range(total):
                        await self._execute_unit(executor)
                        self.report.progress += 1
                        self.report.state = TaskState.RUNNING
                        await self._notify("on_progress", self.report.progress)
        except Exception as error:
            await self._fail(error)
        else:
            await self._succeed()

        return self.report
