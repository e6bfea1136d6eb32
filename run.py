import argparse
import asyncio
import os
import sys

from pydantic import ValidationError

from src.exceptions import ConfigurationError
from src.logger import AsyncLogger
from src.models import Goal, TaskOptions

log = AsyncLogger()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Taiko Trailblazers automation")
    parser.add_argument(
        "--goal",
        help='Run without prompts, e.g. --goal "vote-on-ruby 74 0.23"',
    )
    parser.add_argument(
        "--wallets",
        help="Path to the wallets JSON file (default: wallets_file from settings.yaml)",
    )
    return parser.parse_args(argv)


def parse_goal(raw_goal: str) -> tuple[Goal, TaskOptions]:
    if not raw_goal.strip():
        raise ConfigurationError("Goal must not be empty")

    goal_name, *goal_args = raw_goal.split()
    try:
        goal = Goal(goal_name)
    except ValueError as error:
        raise ConfigurationError(f"Goal not found: {goal_name}") from error

    match goal:
        case Goal.VOTE_ON_RUBY:
            if len(goal_args) != 2:
                raise ConfigurationError(
                    f"{goal} expects <number_of_votes> <gas_price_gwei>, got: {' '.join(goal_args)}"
                )
            number_of_votes, gas_price_gwei = goal_args
            try:
                return goal, TaskOptions(
                    number_of_units=int(number_of_votes),
                    gas_price_gwei=gas_price_gwei,
                )
            except (ValueError, ValidationError) as error:
                raise ConfigurationError(f"Invalid goal arguments: {error}") from error


async def run_goal(raw_goal: str, wallets_file: str | None) -> None:
    from bot_loader import config, rate_limiter
    from module_processor import ModuleProcessor
    from src.utils import load_config

    goal, options = parse_goal(raw_goal)
    config = load_config(wallets_file or config.wallets_file)
    processor = ModuleProcessor(config, rate_limiter)

    match goal:
        case Goal.VOTE_ON_RUBY:
            await processor.run_vote_on_ruby(
                config.wallets,
                [options.number_of_units] * len(config.wallets),
                options.gas_price_gwei,
            )


async def main_loop() -> None:
    from bot_loader import config, rate_limiter
    from module_processor import ModuleProcessor

    await log.logger_msg("✅ Program start", type_msg="info")

    while True:
        try:
            exit_flag = await ModuleProcessor(config, rate_limiter).execute()
            if exit_flag:
                break
        except KeyboardInterrupt:
            await log.logger_msg("🚨 Manual interruption!", type_msg="warning")
            break

        input("\nPress Enter to return to menu...")
        os.system("cls" if os.name == "nt" else "clear")

    await log.logger_msg("👋 Goodbye! Terminal is ready for commands.", type_msg="info")


async def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        if args.goal:
            await run_goal(args.goal, args.wallets)
        else:
            await main_loop()
    except ConfigurationError as error:
        await log.logger_msg(f"❌ {error}", type_msg="error")
        sys.exit(1)


if __name__ == "__main__":
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(main())
