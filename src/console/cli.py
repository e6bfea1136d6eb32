import os
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Sequence

import inquirer
from art import text2art
from colorama import Fore
from inquirer.errors import ValidationError
from inquirer.themes import GreenPassion
from rich import box
from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from src.models import Config, DerivedUserRank, Program, VotesMode, WalletData
from src.report import SummaryRow
from src.utils import ConfigLoader, format_display_number, shorten_address


def _validate_file_exists(_answers: dict, current: str) -> bool:
    if not current:
        raise ValidationError("", reason="Filename is required")
    if not ConfigLoader().resolve_path(current).exists():
        raise ValidationError("", reason=f'File "{current}" does not exist.')
    return True


def _positive_int_validator(message: str):
    def validate(_answers: dict, current: str) -> bool:
        try:
            value = int(str(current).strip())
        except ValueError:
            raise ValidationError("", reason=f"Invalid {message}")
        if value < 1:
            raise ValidationError("", reason=f"{message.capitalize()} must be at least 1")
        return True
    return validate


def _validate_gas_price(_answers: dict, current: str) -> bool:
    try:
        value = Decimal(str(current).strip())
    except InvalidOperation:
        raise ValidationError("", reason="Invalid gas price")
    if not value.is_finite() or value < 0:
        raise ValidationError("", reason="Invalid gas price")
    return True


class Console:
    def __init__(self, config: Config):
        self.config = config
        self.rich_console = RichConsole()

    def show_dev_info(self) -> None:
        os.system("cls" if os.name == "nt" else "clear")

        title = text2art("Ruby Voter", font="small")
        styled_title = Text(title, style="cyan")
        subtitle = Text("Taiko Trailblazers automation", style="green")

        dev_panel = Panel(
            Text.assemble(styled_title, "\n", subtitle, "\n"),
            border_style="yellow",
            expand=False,
            title="[bold green]Welcome[/bold green]",
        )

        self.rich_console.print(dev_panel)
        print()

    def display_info(self) -> None:
        table = Table(title="System Configuration", box=box.ROUNDED)
        table.add_column("Parameter", style="cyan")
        table.add_column("Value", style="magenta")

        table.add_row("RPC", self.config.rpc_url)
        table.add_row("RPC interval", f"{self.config.rpc_rate_limit_interval} sec")
        table.add_row("Start stagger", f"{self.config.start_stagger} sec")
        table.add_row(
            "Votes in flight",
            str(self.config.units_in_flight) if self.config.units_in_flight else "unlimited"
        )

        panel = Panel(
            table,
            expand=False,
            border_style="green",
            title="[bold yellow]System Information[/bold yellow]",
            subtitle="[italic]Use arrow keys to navigate[/italic]",
        )
        self.rich_console.print(panel)

    @staticmethod
    def prompt(data: list) -> dict:
        answers = inquirer.prompt(data, theme=GreenPassion(), raise_keyboard_interrupt=True)
        return answers

    def prompt_wallets_file(self) -> str:
        answers = self.prompt([
            inquirer.Text(
                "wallets_file",
                message=Fore.LIGHTBLACK_EX + "Enter the filename of the wallets configuration file",
                default=self.config.wallets_file,
                validate=_validate_file_exists,
            ),
        ])
        return answers["wallets_file"]

    def get_program(self) -> Program:
        answers = self.prompt([
            inquirer.List(
                "program",
                message=Fore.LIGHTBLACK_EX + "Select the program you want to run",
                choices=[program.value for program in Program],
            ),
        ])
        return Program(answers["program"])

    def prompt_wallet_selection(self, wallets: Sequence[WalletData]) -> list[WalletData]:
        answers = self.prompt([
            inquirer.Confirm(
                "use_all",
                message="Do you want to use all wallets?",
                default=True,
            ),
        ])
        if answers["use_all"]:
            return list(wallets)

        choices = [
            (f"{wallet.name or 'N/A'} | {shorten_address(wallet.address)}", wallet)
            for wallet in wallets
        ]
        answers = self.prompt([
            inquirer.Checkbox(
                "wallets",
                message="Select the wallets you want to use",
                choices=choices,
                validate=lambda _, current: bool(current) or self._raise_required(),
            ),
        ])
        return list(answers["wallets"])

    @staticmethod
    def _raise_required() -> bool:
        raise ValidationError("", reason="You must choose at least one wallet.")

    def prompt_votes_mode(self) -> VotesMode:
        answers = self.prompt([
            inquirer.List(
                "mode",
                message="Select the mode to find the number of votes to cast",
                choices=[mode.value for mode in VotesMode],
                default=VotesMode.MAXIMIZE.value,
            ),
        ])
        return VotesMode(answers["mode"])

    def prompt_number_of_votes(self, default: int = 74) -> int:
        answers = self.prompt([
            inquirer.Text(
                "votes",
                message="Enter the number of transactions to cast",
                default=str(default),
                validate=_positive_int_validator("number of votes"),
            ),
        ])
        return int(answers["votes"].strip())

    def prompt_daily_points_limit(self) -> int:
        answers = self.prompt([
            inquirer.Text(
                "limit",
                message="Enter the daily points limit",
                default=str(self.config.max_daily_points),
                validate=_positive_int_validator("daily points limit"),
            ),
        ])
        return int(answers["limit"].strip())

    def prompt_gas_price(self) -> str:
        answers = self.prompt([
            inquirer.Text(
                "gas",
                message="Enter the gas price in gwei",
                default=self.config.default_gas_price_gwei,
                validate=_validate_gas_price,
            ),
        ])
        return answers["gas"].strip()

    def print_task_reports(self, rows: Sequence[SummaryRow]) -> None:
        now = datetime.now()
        self.rich_console.print("\n====================")
        self.rich_console.print("Task reports:")
        self.rich_console.print(f"Locale Date: {now.strftime('%c')}")
        self.rich_console.print(
            f"UTC Date: {datetime.now(tz=timezone.utc).strftime('%a, %d %b %Y %H:%M:%S GMT')}"
        )

        table = Table(box=box.ROUNDED)
        table.add_column("No", justify="right")
        table.add_column("Name", justify="left")
        table.add_column("Address", justify="center")
        table.add_column("Status", justify="center")
        table.add_column("Note", justify="left")

        for index, row in enumerate(rows, 1):
            table.add_row(str(index), row["name"], row["address"], row["status"], row["note"])
        self.rich_console.print(table)

    def print_dashboard(
        self,
        users: Sequence[tuple[WalletData, DerivedUserRank]],
        max_daily_points: int
    ) -> None:
        table = Table(title="Trailblazers Dashboard", box=box.ROUNDED)
        table.add_column("No", justify="right")
        table.add_column("Name", justify="left")
        table.add_column("Address", justify="center")
        table.add_column("Rank", justify="right")
        table.add_column("Score", justify="right")
        table.add_column("Multiplier", justify="right")
        table.add_column("Daily Score", justify="right")
        table.add_column("Daily Limit?", justify="left")

        for index, (wallet, user) in enumerate(users, 1):
            remaining = max(0, max_daily_points - user.daily_points_earned)
            daily_limit = (
                "🚨 Max Daily" if user.is_max_daily_points_earned
                else f"{format_display_number(remaining)} Points to be earned"
            )
            table.add_row(
                str(index),
                wallet.name or "N/A",
                shorten_address(user.address),
                format_display_number(user.rank),
                format_display_number(user.total_score),
                f"x{user.multiplier:.2f}",
                format_display_number(user.daily_points_earned),
                daily_limit,
            )
        self.rich_console.print(table)
