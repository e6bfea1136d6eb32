from .cli import Console
from .progress import ProgressBarObserver, TaskProgressBoard
