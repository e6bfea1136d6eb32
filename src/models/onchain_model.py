import asyncio
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar

import aiofiles
import orjson
from web3 import AsyncWeb3

ROOT_DIR = Path(__file__).parent.parent.parent.absolute()


class ContractError(Exception):
    """Base exception for contract-related errors"""
    pass


@dataclass(slots=True)
class BaseContract:
    address: str
    abi_file: str

    _abi_cache: ClassVar[dict[str, tuple[list[dict[str, Any]], float]]] = {}
    _cache_lock: ClassVar[asyncio.Lock] = asyncio.Lock()
    _abi_path: ClassVar[Path] = ROOT_DIR / "abi"
    CACHE_TTL: ClassVar[int] = 3600

    async def get_abi(self) -> list[dict[str, Any]]:
        async with self._cache_lock:
            await self._validate_cache()
            return self._abi_cache[self.abi_file][0]

    async def _validate_cache(self) -> None:
        current_time = time.time()
        if (cached := self._abi_cache.get(self.abi_file)) and (current_time - cached[1]) < self.CACHE_TTL:
            return
        await self._load_abi_file(current_time)

    async def _load_abi_file(self, timestamp: float) -> None:
        file_path = self._abi_path / self.abi_file
        try:
            async with aiofiles.open(file_path, "rb") as f:
                content = await f.read()
            abi_data = orjson.loads(content)
            if not isinstance(abi_data, list):
                raise ContractError(f"Invalid ABI structure in {file_path}")
            self._abi_cache[self.abi_file] = (abi_data, timestamp)
        except FileNotFoundError as e:
            raise ContractError(f"ABI file not found: {file_path}") from e
        except orjson.JSONDecodeError as e:
            raise ContractError(f"Invalid JSON in ABI file: {file_path}") from e


@dataclass(slots=True)
class RubyVoteContract(BaseContract):
    address: str = AsyncWeb3.to_checksum_address("0x4D1E2145082d0AB0fDa4a973dC4887C7295e21aB")
    abi_file: str = "ruby_vote.json"
