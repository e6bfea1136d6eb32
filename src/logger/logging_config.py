import os
import sys
import time
import asyncio
from pathlib import Path
from typing import Literal

import aiofiles
from aiologger import Logger
from aiologger.levels import LogLevel
from aiologger.handlers.base import Handler
from colorama import init, Fore, Style

init(autoreset=True)

ROOT_DIR = Path(__file__).parent.parent.parent.absolute()
LOGS_FILE_PATH = os.path.join(ROOT_DIR, "logs")

_SUCCESS_PREFIX = "[success]"


def _split_success(record) -> tuple[str, str]:
    levelname = record.levelname
    msg = str(record.msg)
    if levelname == "INFO":
        msg_parts = msg.split(" ", 1)
        if msg_parts and msg_parts[0].lower() == _SUCCESS_PREFIX:
            levelname = "SUCCESS"
            msg = msg_parts[1] if len(msg_parts) > 1 else ""
    return levelname, msg


class FileFormatter:
    def format(self, record) -> str:
        formatted_time = time.strftime(
            "%Y-%m-%d %H:%M:%S",
            time.localtime(record.created)
        )
        levelname, msg = _split_success(record)
        padding = " " * (8 - len(levelname))

        return (
            f"[{formatted_time}] | [{record.name}] | "
            f"[{levelname}]{padding} | {msg}"
        )


class AsyncLevelFileHandler(Handler):
    def __init__(self, base_name: str = "app_log", level=LogLevel.DEBUG) -> None:
        super().__init__(level=level)
        self.base_name = base_name
        self.file_path = os.path.join(LOGS_FILE_PATH, f"{base_name}.log")
        self.formatter = FileFormatter()
        self._initialized = False

    async def initialize(self) -> None:
        os.makedirs(LOGS_FILE_PATH, exist_ok=True)
        self._initialized = True

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def emit(self, record) -> None:
        if not self.initialized:
            await self.initialize()
        message = self.formatter.format(record)
        async with aiofiles.open(self.file_path, mode="a", encoding="utf-8") as f:
            await f.write(message + "\n")

    async def close(self) -> None:
        self._initialized = False


class ColoredFormatter:
    LEVEL_COLORS = {
        "DEBUG": Fore.CYAN,
        "INFO": Fore.WHITE,
        "SUCCESS": Fore.GREEN,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.MAGENTA + Style.BRIGHT,
    }

    def format(self, record) -> str:
        formatted_time = time.strftime(
            "%H:%M:%S",
            time.localtime(record.created)
        )
        levelname, msg = _split_success(record)
        level_color = self.LEVEL_COLORS.get(levelname, Fore.WHITE)
        padding = " " * (8 - len(levelname))

        time_part = f"{Fore.CYAN}[{formatted_time}]{Style.RESET_ALL}"
        level_part = f"{level_color}[{levelname}]{padding}{Style.RESET_ALL}"
        msg_part = f"{level_color}{msg}{Style.RESET_ALL}"

        return f"{time_part} | {level_part} | {msg_part}"


class AsyncConsoleHandler(Handler):
    def __init__(self, level=LogLevel.DEBUG) -> None:
        super().__init__(level=level)
        self.formatter = ColoredFormatter()
        self._initialized = True

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def emit(self, record) -> None:
        message = self.formatter.format(record)
        sys.stdout.write(message + "\n")
        sys.stdout.flush()
        await asyncio.sleep(0)

    async def close(self) -> None:
        self._initialized = False


_LOGGERS: dict[str, Logger] = {}


def _build_logger(name: str, file_base_name: str) -> Logger:
    key = f"{name}:{file_base_name}"
    if key not in _LOGGERS:
        level = LogLevel[os.getenv("LOG_LEVEL", "INFO").upper()]
        logger = Logger(name=name, level=level)
        logger.add_handler(AsyncConsoleHandler(level=LogLevel.DEBUG))
        logger.add_handler(AsyncLevelFileHandler(base_name=file_base_name, level=LogLevel.DEBUG))
        _LOGGERS[key] = logger
    return _LOGGERS[key]


class AsyncLogger:
    def __init__(
        self,
        name: str = "Ruby Voter",
        file_base_name: str = "app_log"
    ) -> None:
        self._logger = _build_logger(name, file_base_name)

    async def logger_msg(
        self,
        msg: str = "",
        type_msg: Literal["info", "error", "success", "warning", "debug"] = "info",
        address: str | None = None,
        method_name: str | None = None,
        account_name: str | None = None,
        class_name: str | None = None,
    ) -> None:
        if class_name is None:
            class_name = type(self).__name__
            if class_name == "AsyncLogger":
                class_name = None

        info = self._build_info(
            account_name,
            address,
            class_name,
            method_name
        )
        full_msg = f"{info} {msg}" if info else msg

        log_method = {
            "success": self._logger.info,
            "info": self._logger.info,
            "error": self._logger.error,
            "warning": self._logger.warning,
            "debug": self._logger.debug
        }[type_msg]

        prefix = f"{_SUCCESS_PREFIX} " if type_msg == "success" else ""
        await log_method(f"{prefix}{full_msg}")

    @staticmethod
    def _build_info(
        account_name: str | None,
        address: str | None,
        class_name: str | None,
        method_name: str | None,
    ) -> str:
        info_parts = []
        if account_name:
            info_parts.append(f"[{account_name}]")
        if address:
            info_parts.append(f"[{address}]")
        if class_name:
            info_parts.append(f"[{class_name}]")
        if method_name:
            info_parts.append(f"[{method_name}]")
        return " | ".join(info_parts)

    def get_logger(self) -> Logger:
        return self._logger
