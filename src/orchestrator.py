import asyncio
from typing import Callable, Sequence

from src.logger import AsyncLogger
from src.models import TaskOptions, TaskReport, TaskState, WalletData
from src.task_runner import ExecutorFactory, TaskObserver, TaskRunner, normalize_error


ObserverFactory = Callable[[int, WalletData], TaskObserver]


class TaskOrchestrator(AsyncLogger):
    """
    Starts one runner per wallet and waits for all of them to finish.

    A failed wallet never cancels or fails the others. Reports come back
    in the order the wallets were given.
    """

    def __init__(
        self,
        executor_factory: ExecutorFactory,
        start_stagger: float = 1.0,
        units_in_flight: int = 0,
        observer_factory: ObserverFactory | None = None
    ) -> None:
        super().__init__()
        self.executor_factory = executor_factory
        self.start_stagger = start_stagger
        self.unit_gate = asyncio.Semaphore(units_in_flight) if units_in_flight > 0 else None
        self.observer_factory = observer_factory

    def _create_runner(self, index: int, wallet: WalletData, options: TaskOptions) -> TaskRunner:
        observer = self.observer_factory(index, wallet) if self.observer_factory else None
        return TaskRunner(
            wallet,
            options,
            self.executor_factory,
            observer=observer,
            unit_gate=self.unit_gate,
        )

    async def run(
        self,
        wallets: Sequence[WalletData],
        options: Sequence[TaskOptions]
    ) -> list[TaskReport]:
        if len(wallets) != len(options):
            raise ValueError(
                f"Got {len(options)} task options for {len(wallets)} wallets"
            )

        await self.logger_msg(f"Starting tasks for {len(wallets)} wallets", type_msg="info")

        runners: list[TaskRunner] = []
        tasks: list[asyncio.Task[TaskReport]] = []
        for index, (wallet, wallet_options) in enumerate(zip(wallets, options)):
            runner = self._create_runner(index, wallet, wallet_options)
            runners.append(runner)
            tasks.append(asyncio.create_task(runner.run(), name=f"runner-{wallet.address}"))
            if self.start_stagger > 0 and index < len(wallets) - 1:
                await asyncio.sleep(self.start_stagger)

        results = await asyncio.gather(*tasks, return_exceptions=True)

        reports: list[TaskReport] = []
        for runner, result in zip(runners, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                await self.logger_msg(
                    f"Runner crashed: {result}", type_msg="error",
                    address=runner.wallet.address, method_name="run"
                )
                runner.report.success = False
                runner.report.error = normalize_error(result)
                runner.report.state = TaskState.FAILED
            reports.append(runner.report)

        succeeded = sum(1 for report in reports if report.success)
        await self.logger_msg(
            f"Finished: {succeeded}/{len(reports)} wallets succeeded",
            type_msg="success" if succeeded == len(reports) else "warning"
        )
        return reports
