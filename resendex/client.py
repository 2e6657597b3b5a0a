import logging
from typing import Any, Optional, Union

import httpx

from .api_keys import ApiKeys
from .audiences import Audiences
from .batch import Batch
from .broadcasts import Broadcasts
from .config import ClientConfig
from .contacts import Contacts
from .core import RateLimiter
from .domains import Domains
from .emails import Emails
from .executor import AsyncExecutor, BlockingExecutor
from .models import RateLimiterStats
from .receiving import Receiving
from .segments import Segments
from .templates import Templates
from .topics import Topics
from .webhooks import Webhooks

logger = logging.getLogger(__name__)


class Resend:
    """
    Client for the Resend API.

    One client runs in one mode, chosen at construction:

    - non-blocking (default): every call returns a coroutine; use from
      asyncio code and close with ``await client.aclose()``
    - blocking (``blocking=True``): every call returns its result; safe to
      share between threads, close with ``client.close()``

    All services of a client share one :class:`~resendex.core.RateLimiter`,
    so the configured rate holds across every endpoint and every concurrent
    caller. Separate clients never share a budget.

    Example:
        ```python
        async with Resend("re_123") as client:
            sent = await client.emails.send(
                CreateEmailOptions(
                    from_="Acme <onboarding@resend.dev>",
                    to="delivered@resend.dev",
                    subject="Hello",
                    html="<p>It works</p>",
                )
            )
            print(sent.id)
        ```
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        config: Optional[ClientConfig] = None,
        blocking: bool = False,
        transport: Union[httpx.BaseTransport, httpx.AsyncBaseTransport, None] = None,
        http_client: Union[httpx.Client, httpx.AsyncClient, None] = None,
        **options: Any,
    ):
        """
        Args:
            api_key: API key; required unless ``config`` is given
            config: A complete configuration; ``api_key`` and ``options``
                override its values
            blocking: Select the blocking calling convention
            transport: httpx transport to send requests through
            http_client: Preconfigured httpx client matching the mode; the
                client's own timeout applies instead of ``config.timeout``
            **options: Any other :class:`~resendex.config.ClientConfig` field

        Raises:
            ValueError: If no API key is given or a value is invalid
        """
        if config is None:
            if api_key is None:
                raise ValueError("api_key is required; use Resend.from_env() to read RESEND_API_KEY")
            config = ClientConfig(api_key=api_key, **options)
        elif api_key is not None or options:
            if api_key is not None:
                options["api_key"] = api_key
            config = config.with_options(**options)

        self._config = config
        self._blocking = blocking
        self._transport = transport
        self._limiter = RateLimiter.from_config(config)

        executor_cls = BlockingExecutor if blocking else AsyncExecutor
        self._executor = executor_cls(
            config, self._limiter, http_client=http_client, transport=transport
        )

        self.emails = Emails(self._executor)
        self.batch = Batch(self._executor)
        self.receiving = Receiving(self._executor)
        self.domains = Domains(self._executor)
        self.api_keys = ApiKeys(self._executor)
        self.audiences = Audiences(self._executor)
        self.contacts = Contacts(self._executor)
        self.segments = Segments(self._executor)
        self.topics = Topics(self._executor)
        self.templates = Templates(self._executor)
        self.broadcasts = Broadcasts(self._executor)
        self.webhooks = Webhooks(self._executor)

        logger.debug(
            f"Created {'blocking' if blocking else 'async'} client for {config.base_url} "
            f"({config.rate_limit} requests per {config.rate_limit_window}s)"
        )

    @classmethod
    def from_env(cls, *, blocking: bool = False, **options: Any) -> "Resend":
        """
        Build a client from ``RESEND_*`` environment variables.

        Raises:
            ValueError: If ``RESEND_API_KEY`` is missing or blank
        """
        transport = options.pop("transport", None)
        http_client = options.pop("http_client", None)
        return cls(
            config=ClientConfig.from_env(**options),
            blocking=blocking,
            transport=transport,
            http_client=http_client,
        )

    def with_options(self, **options: Any) -> "Resend":
        """A new client in the same mode with some config values replaced and its own limiter."""
        return type(self)(
            config=self._config.with_options(**options),
            blocking=self._blocking,
            transport=self._transport,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def limiter(self) -> RateLimiter:
        return self._limiter

    @property
    def blocking(self) -> bool:
        return self._blocking

    def get_stats(self) -> RateLimiterStats:
        return self._limiter.get_stats()

    def close(self) -> None:
        if not isinstance(self._executor, BlockingExecutor):
            raise TypeError("use 'await client.aclose()' to close a non-blocking client")
        self._executor.close()

    async def aclose(self) -> None:
        if not isinstance(self._executor, AsyncExecutor):
            raise TypeError("use client.close() to close a blocking client")
        await self._executor.aclose()

    def __enter__(self) -> "Resend":
        if not self._blocking:
            raise TypeError("use 'async with' with a non-blocking client")
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    async def __aenter__(self) -> "Resend":
        if self._blocking:
            raise TypeError("use 'with' with a blocking client")
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        mode = "blocking" if self._blocking else "async"
        return f"Resend(base_url={self._config.base_url!r}, mode={mode!r})"
