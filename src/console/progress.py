from typing import Self

from rich.console import Console as RichConsole
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
)

from config.settings import NAME_MAX_LENGTH, STATUS_MAX_LENGTH
from src.models import WalletData
from src.task_runner import TaskObserver
from src.utils import shorten_address, truncate_string


class ProgressBarObserver(TaskObserver):
    """Drives one progress bar from a runner's events."""

    def __init__(self, progress: Progress, wallet: WalletData) -> None:
        self.progress = progress
        self.wallet = wallet
        self.task_id: TaskID | None = None

    def on_init(self, total: int) -> None:
        self.task_id = self.progress.add_task(
            "",
            total=total,
            name=truncate_string(self.wallet.name or "", NAME_MAX_LENGTH).ljust(NAME_MAX_LENGTH + 3),
            address=shorten_address(self.wallet.address),
            status="⏳",
        )

    def _update(self, **fields) -> None:
        if self.task_id is not None:
            self.progress.update(self.task_id, **fields)

    def on_progress(self, progress: int) -> None:
        self._update(completed=progress, status="⏳")

    def on_success(self) -> None:
        self._update(status="✅")

    def on_fail(self, error: Exception) -> None:
        self._update(status=f"❌ {truncate_string(str(error), STATUS_MAX_LENGTH)}")


class TaskProgressBoard:
    def __init__(self, console: RichConsole | None = None) -> None:
        self.progress = Progress(
            TextColumn("{task.fields[name]}"),
            TextColumn("{task.fields[address]}"),
            BarColumn(),
            MofNCompleteColumn(),
            TextColumn("{task.fields[status]}"),
            console=console,
        )

    def __enter__(self) -> Self:
        self.progress.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.progress.stop()

    def observer(self, _index: int, wallet: WalletData) -> ProgressBarObserver:
        return ProgressBarObserver(self.progress, wallet)
