import asyncio
from typing import Awaitable, Callable, Sequence

from src.api import TrailblazersClient
from src.console import Console, TaskProgressBoard
from src.exceptions import BotError, ConfigurationError
from src.logger import AsyncLogger
from src.models import (
    Config,
    DerivedUserRank,
    Program,
    TaskOptions,
    TaskReport,
    VotesMode,
    WalletData,
)
from src.orchestrator import TaskOrchestrator
from src.rate_limiter import RpcRateLimiter
from src.report import summarize_reports
from src.tasks import VoteOnRubyModule
from src.utils import calculate_number_of_votes, load_config, random_sleep


class ModuleProcessor(AsyncLogger):
    __slots__ = ("config", "rate_limiter", "console", "programs")

    def __init__(
        self,
        config: Config,
        rate_limiter: RpcRateLimiter,
        console: Console | None = None
    ) -> None:
        super().__init__()
        self.config = config
        self.rate_limiter = rate_limiter
        self.console = console or Console(config)

        self.programs: dict[Program, Callable[[Sequence[WalletData]], Awaitable[None]]] = {
            Program.VOTE_ON_RUBY: self.process_vote_on_ruby,
            Program.VIEW_DASHBOARD: self.process_view_dashboard,
        }

    def _create_vote_module(self, wallet: WalletData, options: TaskOptions) -> VoteOnRubyModule:
        return VoteOnRubyModule(
            wallet,
            options,
            rpc_url=self.config.rpc_url,
            rate_limiter=self.rate_limiter,
            receipt_timeout=self.config.receipt_timeout,
            gas_limit_multiplier=self.config.gas_limit_multiplier,
            explorer_url=self.config.explorer_url,
        )

    def _trailblazers_client(self) -> TrailblazersClient:
        return TrailblazersClient(
            self.config.trailblazers_api_url, self.config.max_daily_points
        )

    async def get_derived_ranks(
        self,
        wallets: Sequence[WalletData]
    ) -> list[DerivedUserRank | None]:
        async with self._trailblazers_client() as client:
            results = await asyncio.gather(
                *(client.get_derived_user_rank(wallet.address) for wallet in wallets),
                return_exceptions=True,
            )

        ranks: list[DerivedUserRank | None] = []
        for wallet, result in zip(wallets, results):
            if isinstance(result, Exception):
                await self.logger_msg(
                    f"Failed to get Trailblazers rank: {result}", type_msg="error",
                    address=wallet.address, method_name="get_derived_ranks"
                )
                ranks.append(None)
            elif isinstance(result, BaseException):
                raise result
            else:
                ranks.append(result)
        return ranks

    async def resolve_number_of_votes(
        self,
        wallets: Sequence[WalletData],
        daily_points_limit: int
    ) -> list[int]:
        ranks = await self.get_derived_ranks(wallets)
        return [
            calculate_number_of_votes(
                daily_points_limit, rank.daily_points_earned, self.config.points_per_vote
            ) if rank else 0
            for rank in ranks
        ]

    async def run_vote_on_ruby(
        self,
        wallets: Sequence[WalletData],
        number_of_votes: Sequence[int],
        gas_price_gwei: str
    ) -> list[TaskReport]:
        options = [
            TaskOptions(number_of_units=votes, gas_price_gwei=gas_price_gwei)
            for votes in number_of_votes
        ]

        with TaskProgressBoard(self.console.rich_console) as board:
            orchestrator = TaskOrchestrator(
                self._create_vote_module,
                start_stagger=self.config.start_stagger,
                units_in_flight=self.config.units_in_flight,
                observer_factory=board.observer,
            )
            reports = await orchestrator.run(wallets, options)

        self.console.print_task_reports(summarize_reports(reports))
        return reports

    async def process_vote_on_ruby(self, wallets: Sequence[WalletData]) -> None:
        selected = self.console.prompt_wallet_selection(wallets)

        match self.console.prompt_votes_mode():
            case VotesMode.FIXED:
                votes = self.console.prompt_number_of_votes()
                number_of_votes = [votes] * len(selected)
            case VotesMode.MAXIMIZE:
                limit = self.console.prompt_daily_points_limit()
                number_of_votes = await self.resolve_number_of_votes(selected, limit)

        gas_price_gwei = self.console.prompt_gas_price()
        await self.run_vote_on_ruby(selected, number_of_votes, gas_price_gwei)

    async def process_view_dashboard(self, wallets: Sequence[WalletData]) -> None:
        selected = self.console.prompt_wallet_selection(wallets)
        delay = self.config.delay_between_requests

        users: list[tuple[WalletData, DerivedUserRank]] = []
        async with self._trailblazers_client() as client:
            for index, wallet in enumerate(selected):
                try:
                    users.append((wallet, await client.get_derived_user_rank(wallet.address)))
                except BotError as error:
                    await self.logger_msg(
                        f"Failed to get Trailblazers rank: {error}", type_msg="error",
                        address=wallet.address, method_name="process_view_dashboard"
                    )
                if index < len(selected) - 1:
                    await random_sleep(wallet.address, delay.min, delay.max)

        self.console.print_dashboard(users, self.config.max_daily_points)

    def load_wallets(self) -> list[WalletData]:
        wallets_file = self.console.prompt_wallets_file()
        self.config = load_config(wallets_file)
        self.console.config = self.config
        return self.config.wallets

    async def execute(self) -> bool:
        """Run one program chosen by the user; returns True to exit."""
        self.console.show_dev_info()
        self.console.display_info()

        try:
            wallets = self.load_wallets()
        except ConfigurationError as error:
            await self.logger_msg(str(error), type_msg="error", method_name="execute")
            return False

        program = self.console.get_program()
        if program is Program.EXIT:
            await self.logger_msg("🔴 Exit program...", type_msg="info")
            return True

        await self.programs[program](wallets)
        return False
