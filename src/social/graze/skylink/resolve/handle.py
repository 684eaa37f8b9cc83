"""AT Protocol handle resolution.

Resolves AT Protocol handles to DIDs using a DNS TXT record looked up over DNS-over-HTTPS,
falling back to the HTTPS well-known endpoint. Each method returns None on failure; the
first one to produce a DID wins.
"""

import logging
from typing import Any, Awaitable, Callable, Final, Iterable, Optional, TypeVar

from aiohttp import ClientSession, hdrs
import sentry_sdk

from social.graze.skylink.model.cache import ResolutionCache
from social.graze.skylink.model.uri import is_did
from social.graze.skylink.resolve.flight import InFlight
from social.graze.skylink.resolve.http import is_success

logger = logging.getLogger(__name__)

T = TypeVar("T")

DNS_OVER_HTTPS_ENDPOINT: Final = "https://cloudflare-dns.com/dns-query"
DNS_JSON_CONTENT_TYPE: Final = "application/dns-json"
DNS_TYPE_TXT: Final = 16


def did_from_dns_answers(body: Any, name: str) -> Optional[str]:
    """Extract a DID from a DNS JSON response.

    Accepts the first answer for exactly ``name`` that is a TXT record holding a quoted
    ``did=did:...`` value.

    Args:
        body: Decoded application/dns-json response body
        name: The queried record name, e.g. _atproto.alice.example

    Returns:
        DID string if a matching answer is present, None otherwise
    """
    if not isinstance(body, dict):
        return None
    answers = body.get("Answer")
    if not isinstance(answers, list):
        return None
    for answer in answers:
        if not isinstance(answer, dict):
            continue
        data = answer.get("data")
        if (
            answer.get("name") == name
            and answer.get("type") == DNS_TYPE_TXT
            and isinstance(data, str)
            and data.startswith('"did=did:')
            and data.endswith('"')
        ):
            return data[5:-1]
    return None


async def resolve_handle_dns(session: ClientSession, handle: str) -> Optional[str]:
    """Resolve AT Protocol handle to DID using DNS TXT record.

    Queries the _atproto.{handle} TXT record through the Cloudflare DNS JSON API.

    Args:
        session: HTTP client session
        handle: AT Protocol handle to resolve

    Returns:
        DID string if found, None if resolution fails
    """
    name = f"_atproto.{handle}"
    try:
        async with session.get(
            f"{DNS_OVER_HTTPS_ENDPOINT}?name={name}&type=TXT",
            headers={hdrs.ACCEPT: DNS_JSON_CONTENT_TYPE},
        ) as resp:
            if not is_success(resp.status):
                return None
            body = await resp.json(content_type=None)
    except Exception as e:
        logger.debug("DNS lookup for %s failed", name, exc_info=True)
        sentry_sdk.capture_exception(e)
        return None
    return did_from_dns_answers(body, name)


async def resolve_handle_http(session: ClientSession, handle: str) -> Optional[str]:
    """Resolve AT Protocol handle to DID using HTTPS well-known endpoint.

    Fetches DID from https://{handle}/.well-known/atproto-did endpoint.

    Args:
        session: HTTP client session
        handle: AT Protocol handle to resolve

    Returns:
        DID string if found, None if resolution fails
    """
    try:
        async with session.get(f"https://{handle}/.well-known/atproto-did") as resp:
            if not is_success(resp.status):
                return None
            body = await resp.text()
    except Exception as e:
        logger.debug("Well-known lookup for %s failed", handle, exc_info=True)
        sentry_sdk.capture_exception(e)
        return None
    if body is None:
        return None
    body = body.strip()
    if is_did(body):
        return body
    return None


async def first_resolved(
    steps: Iterable[Callable[[], Awaitable[Optional[T]]]],
) -> Optional[T]:
    """Run lookup steps in order and return the first non-None result.

    Later steps are not started once one has succeeded.
    """
    for step in steps:
        result = await step()
        if result is not None:
            return result
    return None


async def resolve_handle(session: ClientSession, handle: str) -> Optional[str]:
    """Resolve AT Protocol handle to DID using DNS, then HTTPS.

    Args:
        session: HTTP client session
        handle: AT Protocol handle to resolve

    Returns:
        DID string if found via either method, None if both fail
    """
    return await first_resolved(
        [
            lambda: resolve_handle_dns(session, handle),
            lambda: resolve_handle_http(session, handle),
        ]
    )


class HandleResolver:
    """
    Caching handle resolver.

    Handles are compared case-insensitively. Successful resolutions are kept in the
    shared ResolutionCache for the rest of the session; failures are not remembered, so
    the next call tries the network again. Concurrent calls for the same handle share a
    single lookup.
    """

    def __init__(
        self, session: ClientSession, cache: Optional[ResolutionCache] = None
    ) -> None:
        self.session = session
        self.cache = cache if cache is not None else ResolutionCache()
        self._in_flight: InFlight[Optional[str]] = InFlight()

    async def resolve(self, handle: str) -> Optional[str]:
        handle = handle.lower()
        did = self.cache.did_for_handle(handle)
        if did is not None:
            return did
        return await self._in_flight.run(handle, lambda: self._resolve(handle))

    async def _resolve(self, handle: str) -> Optional[str]:
        did = await resolve_handle(self.session, handle)
        if did is None:
            logger.debug("Unable to resolve handle %s", handle)
            return None
        self.cache.remember_handle(handle, did)
        logger.debug("Resolved %s -> %s", handle, did)
        return did
