import asyncio
from decimal import Decimal
from typing import Any, Union, Self

from asyncio_throttle import Throttler
from better_proxy import Proxy
from eth_account import Account
from eth_typing import ChecksumAddress
from pydantic import HttpUrl
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.contract import AsyncContract
from web3.eth import AsyncEth
from web3.exceptions import TimeExhausted
from web3.types import Nonce, TxParams

from config.settings import NONCE_RETRY_ATTEMPTS, RPC_THROTTLE
from src.exceptions.custom_exceptions import (
    BlockchainError,
    TransactionFailedError,
    WalletError,
)
from src.models.onchain_model import BaseContract
from src.logger import AsyncLogger


logger = AsyncLogger()


class Wallet(AsyncWeb3, Account):
    def __init__(
        self,
        private_key: str,
        rpc_url: Union[HttpUrl, str],
        proxy: Proxy | None = None,
        receipt_timeout: float = 120
    ) -> None:
        self._provider = AsyncHTTPProvider(
            str(rpc_url),
            request_kwargs={
                "proxy": proxy.as_url if proxy else None,
            }
        )
        super().__init__(self._provider, modules={"eth": AsyncEth})

        self.private_key = self._initialize_private_key(private_key)
        self.receipt_timeout = receipt_timeout
        self._contracts_cache: dict[str, AsyncContract] = {}
        self._throttler = Throttler(rate_limit=RPC_THROTTLE[0], period=RPC_THROTTLE[1])

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        try:
            await self._provider.disconnect()
        except Exception as error:
            await logger.logger_msg(
                msg=f"Failed to close RPC session: {error}", type_msg="warning",
                address=self.wallet_address, class_name=self.__class__.__name__,
                method_name="__aexit__"
            )

    @staticmethod
    def _initialize_private_key(private_key: str) -> Account:
        try:
            stripped_key = private_key.strip().lower()
            if not stripped_key.startswith("0x"):
                formatted_key = f"0x{stripped_key}"
            else:
                formatted_key = stripped_key
            return Account.from_key(formatted_key)
        except (ValueError, AttributeError) as error:
            raise WalletError(f"Invalid private key format: {error}") from error

    @property
    def wallet_address(self) -> ChecksumAddress:
        return self.private_key.address

    @staticmethod
    def _get_checksum_address(address: str) -> ChecksumAddress:
        return AsyncWeb3.to_checksum_address(address)

    async def is_rpc_available(self) -> bool:
        async with self._throttler:
            return await self.is_connected()

    async def get_contract(self, contract: BaseContract) -> AsyncContract:
        address = self._get_checksum_address(contract.address)
        if address not in self._contracts_cache:
            abi = await contract.get_abi()
            self._contracts_cache[address] = self.eth.contract(
                address=address,
                abi=abi
            )
        return self._contracts_cache[address]

    async def get_nonce(self) -> Nonce:
        for attempt in range(3):
            try:
                async with self._throttler:
                    count = await self.eth.get_transaction_count(self.wallet_address, 'pending')
                return Nonce(count)
            except Exception as e:
                await logger.logger_msg(
                    msg=f"Failed to get nonce (attempt {attempt + 1}): {e}", type_msg="warning",
                    address=self.wallet_address, class_name=self.__class__.__name__,
                    method_name="get_nonce"
                )
                if attempt < 2:
                    await asyncio.sleep(1)
                else:
                    raise BlockchainError("Failed to get nonce after 3 attempts") from e

    def gwei_to_wei(self, gas_price_gwei: str) -> int:
        return self.to_wei(Decimal(gas_price_gwei), "gwei")

    async def build_transaction_params(
        self,
        contract_function: Any,
        gas_price_gwei: str,
        value: int = 0,
        gas_limit_multiplier: int = 1,
        **kwargs
    ) -> TxParams:
        base_params = {
            "from": self.wallet_address,
            "nonce": await self.get_nonce(),
            "value": value,
            **kwargs
        }

        try:
            async with self._throttler:
                gas_estimate = await contract_function.estimate_gas({
                    "from": self.wallet_address,
                    "value": value,
                })
        except Exception as error:
            await logger.logger_msg(
                msg=f"Gas estimation failed: {error}", type_msg="error",
                address=self.wallet_address, class_name=self.__class__.__name__,
                method_name="build_transaction_params"
            )
            raise BlockchainError(f"Failed to estimate gas: {error}") from error

        base_params.update({
            "gas": int(gas_estimate * gas_limit_multiplier),
            "gasPrice": self.gwei_to_wei(gas_price_gwei),
        })
        return await contract_function.build_transaction(base_params)

    async def send_and_verify_transaction(self, transaction: TxParams) -> str:
        """
        Sign, send and wait for the receipt.

        Returns the transaction hash; raises ``TransactionFailedError`` when
        the transaction reverts or cannot be sent.
        """
        last_error: Exception | None = None

        for attempt in range(1, NONCE_RETRY_ATTEMPTS + 1):
            try:
                signed = self.private_key.sign_transaction(transaction)
                async with self._throttler:
                    tx_hash = await self.eth.send_raw_transaction(signed.raw_transaction)
            except Exception as error:
                error_str = str(error)
                last_error = error

                if "nonce too low" in error_str.lower() or "NONCE_TOO_SMALL" in error_str:
                    await logger.logger_msg(
                        msg=f"Nonce too small. Current: {transaction.get('nonce')}. Getting new nonce.",
                        type_msg="warning", address=self.wallet_address,
                        class_name=self.__class__.__name__, method_name="send_and_verify_transaction"
                    )
                    transaction["nonce"] = await self.get_nonce()
                    continue

                raise TransactionFailedError(f"Error during sending transaction: {error_str}") from error

            try:
                receipt = await self.eth.wait_for_transaction_receipt(
                    tx_hash, timeout=self.receipt_timeout
                )
            except TimeExhausted as error:
                raise TransactionFailedError(
                    f"Receipt not received in {self.receipt_timeout} seconds",
                    tx_hash=tx_hash.hex()
                ) from error
            if receipt["status"] != 1:
                raise TransactionFailedError(
                    f"Transaction reverted: 0x{tx_hash.hex().removeprefix('0x')}",
                    tx_hash=tx_hash.hex()
                )
            return tx_hash.hex()

        raise TransactionFailedError(
            f"Failed to send transaction after {NONCE_RETRY_ATTEMPTS} attempts. Last error: {last_error}"
        ) from last_error
