"""
Pre-configured requests session for the bunny.net API.
Retries transient errors on idempotent requests and raises on any final 4xx or 5xx response.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields
from urllib.parse import urljoin, urlparse

from requests import Response, Session
from requests.adapters import HTTPAdapter

from bunny_client.errors import MissingAccessKeyError
from bunny_client.retry import BunnyRetry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientOptions:
    """Client settings. A field left as None falls back to DEFAULT_OPTIONS.

    Attributes:
        request_timeout_ms: Per-attempt timeout in milliseconds.
        retry_limit: Maximum retries after the initial attempt.
        backoff_factor: urllib3 backoff factor; changes the delay, not the attempt count.
    """

    request_timeout_ms: int | None = None
    retry_limit: int | None = None
    backoff_factor: float | None = None


DEFAULT_OPTIONS = ClientOptions(request_timeout_ms=5000, retry_limit=3, backoff_factor=1.0)


def resolve_options(options: ClientOptions | Mapping | None = None) -> ClientOptions:
    """Merge options with DEFAULT_OPTIONS.

    An explicit None and an omitted field are the same thing: the default
    is used. Values are otherwise taken as given.
    """
    if options is None:
        options = ClientOptions()
    elif isinstance(options, Mapping):
        options = ClientOptions(**options)

    resolved = {}
    for field in fields(ClientOptions):
        value = getattr(options, field.name)
        resolved[field.name] = getattr(DEFAULT_OPTIONS, field.name) if value is None else value
    return ClientOptions(**resolved)


def raise_for_status(response: Response, *args, **kwargs) -> None:
    """Response hook: turn a 4xx or 5xx response into requests.HTTPError.

    The hook also runs on intermediate redirect responses, so 3xx is left to
    requests: followed when allow_redirects is set, returned as-is otherwise.
    """
    response.raise_for_status()


class BunnyClient(Session):
    """Session bound to a base URL with a default per-attempt timeout."""

    def __init__(self, base_url: str, options: ClientOptions):
        super().__init__()
        self.base_url = base_url.rstrip("/") + "/"
        self.options = options

    @property
    def retry(self) -> BunnyRetry:
        return self.get_adapter(self.base_url).max_retries

    def request(self, method, url, *args, **kwargs):
        kwargs.setdefault("timeout", self.options.request_timeout_ms / 1000)
        if not urlparse(url).scheme:
            # A leading slash would replace the base URL's path.
            url = urljoin(self.base_url, url.lstrip("/"))
        return super().request(method, url, *args, **kwargs)


def get_bunny_client(
    access_key: str, base_url: str, options: ClientOptions | Mapping | None = None
) -> BunnyClient:
    """Create a bunny.net API client.

    Args:
        access_key: bunny.net account or storage zone access key.
        base_url: API base URL; relative request paths are joined onto it.
        options: Timeout, retry limit and backoff overrides.

    Returns:
        A BunnyClient ready for use.

    Raises:
        MissingAccessKeyError: If access_key is empty. No session is created.
    """
    if not access_key:
        raise MissingAccessKeyError()

    resolved = resolve_options(options)
    client = BunnyClient(base_url, resolved)
    client.headers.update({"AccessKey": access_key, "Accept": "application/json"})
    client.hooks["response"].append(raise_for_status)

    adapter = HTTPAdapter(max_retries=BunnyRetry.from_options(resolved))
    client.mount("https://", adapter)
    client.mount("http://", adapter)

    logger.debug(
        f"Bunny client created for {client.base_url} "
        f"(timeout={resolved.request_timeout_ms}ms, retries={resolved.retry_limit}, "
        f"backoff={resolved.backoff_factor}s)"
    )
    return client
