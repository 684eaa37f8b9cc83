from typing import Optional

from aiohttp import ClientSession, ClientTimeout


def is_success(status: int) -> bool:
    """Check if an HTTP status code is in the 2xx range."""
    return 200 <= status < 300


def create_client_session(timeout: Optional[float] = None) -> ClientSession:
    """Create the client session used for every outbound resolution request.

    aiohttp never adds a Referer header on its own, and none is configured here, so
    requests leave without a referrer.

    Args:
        timeout: Total request timeout in seconds, or None for aiohttp's default

    Returns:
        A new ClientSession; the caller owns it and must close it
    """
    kwargs = {}
    if timeout is not None:
        kwargs["timeout"] = ClientTimeout(total=timeout)
    return ClientSession(**kwargs)
