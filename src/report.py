from typing import Iterable, TypedDict

from config.settings import NOTE_MAX_LENGTH
from src.models import UNINITIALIZED, TaskReport
from src.utils import shorten_address, truncate_string


SUCCESS_MARK = "✅"
NOT_AVAILABLE = "N/A"


class SummaryRow(TypedDict):
    name: str
    address: str
    status: str
    note: str


def summarize_task_report(report: TaskReport) -> SummaryRow:
    if report.success:
        status = SUCCESS_MARK
    elif report.total == UNINITIALIZED:
        status = UNINITIALIZED
    else:
        status = f"{report.total - report.progress} trx to go"

    return SummaryRow(
        name=report.name or NOT_AVAILABLE,
        address=shorten_address(report.address),
        status=status,
        note=truncate_string(str(report.error), NOTE_MAX_LENGTH) if report.error else NOT_AVAILABLE,
    )


def summarize_reports(reports: Iterable[TaskReport]) -> list[SummaryRow]:
    return [summarize_task_report(report) for report in reports]
