from src.console import ProgressBarObserver, TaskProgressBoard
from src.exceptions import TransactionFailedError
from tests.conftest import make_wallet


def make_observer():
    board = TaskProgressBoard()
    wallet = make_wallet("0xAA00000000000000000000000000000000001111", name="main")
    return board, board.observer(0, wallet)


def test_observer_tracks_progress():
    board, observer = make_observer()

    observer.on_init(3)
    observer.on_progress(2)
    observer.on_success()

    task = board.progress.tasks[0]
    assert task.total == 3
    assert task.completed == 2
    assert task.fields["address"] == "0xAA00...1111"
    assert task.fields["status"] == "✅"


def test_observer_shows_failure():
    board, observer = make_observer()

    observer.on_init(2)
    observer.on_fail(TransactionFailedError("Transaction reverted"))

    assert board.progress.tasks[0].fields["status"] == "❌ Transaction reverted"


def test_events_before_init_are_ignored():
    board, observer = make_observer()

    observer.on_progress(1)
    observer.on_success()

    assert isinstance(observer, ProgressBarObserver)
    assert board.progress.tasks == []
