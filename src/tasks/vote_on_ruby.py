from typing import Self

from src.exceptions.custom_exceptions import ResourceUnavailableError
from src.logger import AsyncLogger
from src.models import RubyVoteContract, TaskOptions, WalletData
from src.rate_limiter import RpcRateLimiter
from src.utils import show_trx_log
from src.wallet import Wallet


class VoteOnRubyModule(Wallet, AsyncLogger):
    """Casts one zero-value ``vote()`` per ``execute`` call."""

    def __init__(
        self,
        wallet: WalletData,
        options: TaskOptions,
        rpc_url: str,
        rate_limiter: RpcRateLimiter | None = None,
        receipt_timeout: float = 120,
        gas_limit_multiplier: int = 4,
        explorer_url: str | None = None
    ) -> None:
        Wallet.__init__(self, wallet.private_key, rpc_url, wallet.proxy, receipt_timeout)
        AsyncLogger.__init__(self)
        self.options = options
        self.rate_limiter = rate_limiter
        self.gas_limit_multiplier = gas_limit_multiplier
        self.explorer_url = explorer_url

    async def __aenter__(self) -> Self:
        await Wallet.__aenter__(self)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await Wallet.__aexit__(self, exc_type, exc_val, exc_tb)

    async def execute(self) -> str:
        if self.rate_limiter is not None:
            permit = await self.rate_limiter.acquire(
                probe=self.is_rpc_available, address=self.wallet_address
            )
            if permit is None:
                raise ResourceUnavailableError("RPC endpoint is unavailable")

        contract = await self.get_contract(RubyVoteContract())
        tx_params = await self.build_transaction_params(
            contract_function=contract.functions.vote(),
            gas_price_gwei=self.options.gas_price_gwei,
            value=self.to_wei(0, "ether"),
            gas_limit_multiplier=self.gas_limit_multiplier,
        )
        tx_hash = await self.send_and_verify_transaction(tx_params)
        await show_trx_log(
            self.wallet_address, "Vote on Ruby", True, tx_hash, self.explorer_url
        )
        return tx_hash
