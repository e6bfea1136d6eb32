from .config_model import Config, DelayRange, TaskOptions, WalletData
from .onchain_model import BaseContract, ContractError, RubyVoteContract
from .task_model import UNINITIALIZED, TaskReport, TaskState
from .trailblazers_model import DerivedUserRank, HistoryItem, TrailblazersUserRank
from .program_model import Goal, Program, VotesMode
