from typing import Union

from src.logger import AsyncLogger

_SEPARATOR = "=" * 50

logger = AsyncLogger()


async def show_trx_log(
    address: str,
    trx_type: str,
    status: bool,
    result: Union[str, dict, Exception],
    explorer_url: str | None = None
) -> None:
    status_icon = "✅" if status else "❌"
    status_text = "SUCCESS" if status else "FAILED"

    base = (
        f"\n{_SEPARATOR}\n"
        f"Transaction Type: {trx_type}\n"
        f"Status: {status_icon} {status_text}\n"
        f"Wallet: {address}\n"
    )

    if status:
        tx_hash = _normalize_hash(result)
        explorer = (
            f"{explorer_url.rstrip('/')}/tx/{tx_hash}" if explorer_url
            else tx_hash
        )
        await logger.logger_msg(f"{base}Explorer: {explorer}\n{_SEPARATOR}", type_msg="success")
    else:
        error_msg = _get_error_message(result)
        await logger.logger_msg(f"{base}Message: {error_msg}\n{_SEPARATOR}", type_msg="error")


def _normalize_hash(raw_hash: Union[str, dict, Exception]) -> str:
    hash_str = str(raw_hash)
    return hash_str if hash_str.startswith("0x") else f"0x{hash_str}"


def _get_error_message(error: Union[str, dict, Exception]) -> str:
    if isinstance(error, dict):
        return error.get("message", str(error))
    return str(error)
