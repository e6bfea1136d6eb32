import asyncio
import random
from types import TracebackType
from typing import Literal, Any, Self, Type

import aiohttp
import orjson
import ua_generator
from better_proxy import Proxy
from yarl import URL

from config.settings import MAX_RETRY_ATTEMPTS, RETRY_SLEEP_RANGE
from src.exceptions.custom_exceptions import (
    APIError,
    HttpStatusError,
    ServerError,
    SessionRateLimited,
)
from src.logger import AsyncLogger


class BaseAPIClient(AsyncLogger):
    RETRYABLE_ERRORS = (
        ServerError,
        SessionRateLimited,
        aiohttp.ClientError,
        asyncio.TimeoutError,
    )

    def __init__(
        self,
        base_url: str,
        proxy: Proxy | None = None,
        timeout: float = 30
    ) -> None:
        super().__init__()
        self.base_url: str = base_url
        self.proxy: Proxy | None = proxy
        self.timeout = timeout
        self.session: aiohttp.ClientSession | None = None
        self._headers: dict[str, str] = self._generate_headers()

    @staticmethod
    def _generate_headers() -> dict[str, str]:
        user_agent = ua_generator.generate(
            device='desktop',
            platform='windows',
            browser='chrome'
        )

        return {
            'accept': 'application/json',
            'accept-language': 'en-US;q=0.9,en;q=0.8',
            'sec-ch-ua': user_agent.ch.brands,
            'sec-ch-ua-mobile': user_agent.ch.mobile,
            'sec-ch-ua-platform': user_agent.ch.platform,
            'user-agent': user_agent.text
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=self._headers
            )
        return self.session

    async def __aenter__(self) -> Self:
        await self._get_session()
        return self

    async def __aexit__(
        self,
        exc_type: Type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None
    ) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    def _build_url(self, method: str) -> str:
        return str(URL(self.base_url) / method.lstrip('/'))

    async def send_request(
        self,
        request_type: Literal["POST", "GET"] = "GET",
        method: str | None = None,
        json_data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        url: str | None = None,
        max_retries: int = MAX_RETRY_ATTEMPTS,
        retry_delay: tuple[float, float] = RETRY_SLEEP_RANGE,
    ) -> Any:
        """Send a request and return the decoded JSON body."""
        if not url and not method:
            raise ValueError("Either url or method must be provided")

        target_url = url or self._build_url(method)

        for attempt in range(1, max_retries + 1):
            try:
                session = await self._get_session()
                async with session.request(
                    method=request_type,
                    url=target_url,
                    json=json_data,
                    params=params,
                    proxy=self.proxy.as_url if self.proxy else None,
                    raise_for_status=False
                ) as response:
                    text = await response.text()
                    self._verify_status(response.status, text)
                    return self._parse_body(text, target_url)

            except self.RETRYABLE_ERRORS as error:
                if attempt == max_retries:
                    if isinstance(error, APIError):
                        raise
                    raise ServerError(
                        f"The request failed after {max_retries} attempts to {target_url}. Error {error}"
                    ) from error

                delay = random.uniform(*retry_delay) * min(2 ** (attempt - 1), 30)
                await self.logger_msg(
                    msg=f"{type(error).__name__}: {error}. Retry {attempt}/{max_retries} in {delay:.2f} seconds",
                    type_msg="debug", method_name="send_request"
                )
                await asyncio.sleep(delay)

        raise ServerError(f"All {max_retries} attempts have been exhausted")

    @staticmethod
    def _parse_body(text: str, target_url: str) -> Any:
        try:
            return orjson.loads(text)
        except orjson.JSONDecodeError as error:
            raise APIError(f"Response from {target_url} is not JSON", text) from error

    @staticmethod
    def _verify_status(status_code: int, text: str) -> None:
        if 200 <= status_code < 300:
            return

        if status_code == 429:
            raise SessionRateLimited(f"Too many requests: {status_code}", text)
        if status_code >= 500:
            raise ServerError(f"Server error: {status_code}", text)

        error_messages = {
            400: "Invalid request",
            401: "Not authorized",
            403: "Access denied",
            404: "Resource not found",
        }
        error_msg = error_messages.get(status_code, "Client error")
        raise HttpStatusError(f"{error_msg}: {status_code}", status_code, text)
