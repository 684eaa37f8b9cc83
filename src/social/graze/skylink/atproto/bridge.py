"""Bridgy Fed availability probing.

Bridgy Fed mirrors opted-in AT Protocol accounts into the fediverse. An account (or one of
its posts) is mirrored when the bridge answers an ActivityStreams request for it with a
success status.
"""

import logging
from typing import Final, Optional

from aiohttp import ClientSession, hdrs
import sentry_sdk

from social.graze.skylink.model.cache import ResolutionCache
from social.graze.skylink.model.uri import AtUriComponents
from social.graze.skylink.resolve.flight import InFlight
from social.graze.skylink.resolve.http import is_success

logger = logging.getLogger(__name__)

BRIDGE_HOST: Final = "https://bsky.brid.gy"
ACTIVITY_STREAMS_CONTENT_TYPE: Final = (
    'application/ld+json; profile="https://www.w3.org/ns/activitystreams"'
)


def bridge_url(uri: AtUriComponents) -> str:
    """Build the bridge URL for an account or a record.

    Args:
        uri: Permalink components; the authority may be a handle or a DID

    Returns:
        The /ap/ actor URL for an account, or the /convert/ap/ URL for a record
    """
    if uri.collection is None:
        return f"{BRIDGE_HOST}/ap/{uri.authority}"
    return f"{BRIDGE_HOST}/convert/ap/{uri}"


class BridgeProbe:
    """
    Checks whether the bridge has mirrored an authority.

    A confirmed authority is remembered for the rest of the session. Anything short of a
    confirmation (error status, network failure) answers False and is not remembered, so
    a transient failure is retried on the next check.
    """

    def __init__(
        self, session: ClientSession, cache: Optional[ResolutionCache] = None
    ) -> None:
        self.session = session
        self.cache = cache if cache is not None else ResolutionCache()
        self._in_flight: InFlight[bool] = InFlight()

    async def is_bridged(self, uri: AtUriComponents) -> bool:
        if self.cache.is_bridged(uri.authority):
            return True
        url = bridge_url(uri)
        return await self._in_flight.run(url, lambda: self._probe(uri, url))

    async def _probe(self, uri: AtUriComponents, url: str) -> bool:
        try:
            async with self.session.head(
                url, headers={hdrs.ACCEPT: ACTIVITY_STREAMS_CONTENT_TYPE}
            ) as resp:
                status = resp.status
        except Exception as e:
            logger.debug("Bridge probe %s failed", url, exc_info=True)
            sentry_sdk.capture_exception(e)
            return False

        if not is_success(status):
            logger.debug("Bridge probe %s returned %d", url, status)
            return False

        self.cache.remember_bridged(uri.authority)
        return True
