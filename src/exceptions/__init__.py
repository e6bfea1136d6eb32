from .custom_exceptions import (
    APIError,
    BlockchainError,
    BotError,
    ConfigurationError,
    HttpStatusError,
    MalformedResponseError,
    ResourceUnavailableError,
    ServerError,
    SessionRateLimited,
    TransactionFailedError,
    UnknownTaskError,
    WalletError,
)
