from typing import Any


class BotError(Exception):
    """Base exception for all errors raised by the bot"""


class ConfigurationError(BotError):
    """Invalid settings file, wallets file or user input"""


class WalletError(BotError):
    """Error during wallet initialization or signing"""


class BlockchainError(BotError):
    """Base class for blockchain-related errors"""


class TransactionFailedError(BlockchainError):
    """Transaction was sent but reverted or was never confirmed"""

    def __init__(self, message: str, tx_hash: str | None = None) -> None:
        super().__init__(message)
        self.tx_hash = tx_hash


class ResourceUnavailableError(BlockchainError):
    """Rate limiter could not grant a permit for the RPC endpoint"""


class APIError(BotError):
    """Error during HTTP API request"""

    def __init__(self, message: str, response_data: Any = None) -> None:
        super().__init__(message)
        self.response_data = response_data


class ServerError(APIError):
    """Server returned a 5xx or the request failed after all retries"""


class SessionRateLimited(APIError):
    """API rate limit exceeded"""


class HttpStatusError(APIError):
    def __init__(self, message: str, status_code: int, response_data: Any = None) -> None:
        super().__init__(message, response_data)
        self.status_code: int = status_code


class MalformedResponseError(APIError):
    """Response body does not match the expected schema"""


class UnknownTaskError(BotError):
    """Wrapper for unexpected failures raised inside a task loop"""
