"""
Permalink Resolution Orchestrator

Composes permalink parsing, the bridge probe, handle and DID resolution, PDS discovery and
XRPC URL construction into the two flows callers use:

- Bridge-first (``resolve``): accounts and posts are sent to the bridge when it mirrors
  the authority. Otherwise the configured fallback behavior decides between the PDS URL
  and leaving the link alone. Other record kinds go straight to the PDS.
- Direct (``resolve_direct``): always the PDS URL, no bridge probe.

Both flows return a ResolutionResult. A permalink that is not recognized is a no-op
result, not an error. Resolution failures raise ResolutionError from the flows; ``handle``
wraps either flow for UI callers, logging failures as warnings and turning them into a
no-op result so the original link still works.

The orchestrator owns the session caches. Independent orchestrators never share state.
"""

from dataclasses import dataclass
from enum import Enum
import inspect
import logging
from typing import Any, Callable, Optional, Union

from aiohttp import ClientSession

from social.graze.skylink.app.config import ConfigStore, FallbackBehavior
from social.graze.skylink.atproto.bridge import BridgeProbe, bridge_url
from social.graze.skylink.atproto.pds import pds_xrpc_url_for
from social.graze.skylink.errors import (
    HandleUnresolvedError,
    PdsNotFoundError,
    ResolutionError,
)
from social.graze.skylink.model.cache import ResolutionCache
from social.graze.skylink.model.uri import (
    POST_COLLECTION,
    AtUriComponents,
    parse_permalink,
)
from social.graze.skylink.resolve.did import DidDocumentResolver, locate_pds
from social.graze.skylink.resolve.handle import HandleResolver

logger = logging.getLogger(__name__)


class ResultKind(str, Enum):
    url = "url"
    noop = "noop"


@dataclass(frozen=True)
class ResolutionResult:
    """
    Outcome of a resolution flow.

    Attributes:
        kind: ``url`` when the caller should navigate to ``url``; ``noop`` when the
            original link should be followed unmodified
        url: The bridge or PDS URL for ``url`` results
        bridged: True when ``url`` is a bridge URL, to be submitted as a search query
            rather than opened
        error: The failure that turned the flow into a no-op, if any
    """

    kind: ResultKind
    url: Optional[str] = None
    bridged: bool = False
    error: Optional[ResolutionError] = None

    @staticmethod
    def noop(error: Optional[ResolutionError] = None) -> "ResolutionResult":
        return ResolutionResult(kind=ResultKind.noop, error=error)

    @staticmethod
    def bridge(url: str) -> "ResolutionResult":
        return ResolutionResult(kind=ResultKind.url, url=url, bridged=True)

    @staticmethod
    def pds(url: str) -> "ResolutionResult":
        return ResolutionResult(kind=ResultKind.url, url=url)


EmitCallback = Callable[[ResolutionResult], Any]


def probes_bridge(uri: AtUriComponents) -> bool:
    """Check if the bridge has a representation for what the permalink points at."""
    return uri.collection is None or uri.collection == POST_COLLECTION


class ResolutionOrchestrator:
    def __init__(
        self,
        session: ClientSession,
        config: Optional[ConfigStore] = None,
        cache: Optional[ResolutionCache] = None,
    ) -> None:
        self.config = config if config is not None else ConfigStore()
        self.cache = cache if cache is not None else ResolutionCache()
        self.handle_resolver = HandleResolver(session, self.cache)
        self.did_resolver = DidDocumentResolver(session)
        self.bridge_probe = BridgeProbe(session, self.cache)

    async def resolve(self, permalink: str) -> ResolutionResult:
        """Bridge-first flow.

        Raises:
            ResolutionError: If the PDS URL is needed and cannot be resolved
        """
        uri = parse_permalink(permalink)
        if uri is None:
            return ResolutionResult.noop()

        if not probes_bridge(uri):
            return ResolutionResult.pds(await self.pds_url_for(uri))

        if await self.bridge_probe.is_bridged(uri):
            return ResolutionResult.bridge(bridge_url(uri))

        fallback_behavior = self.config.current.effective_fallback_behavior()
        if fallback_behavior == FallbackBehavior.open_pds:
            return ResolutionResult.pds(await self.pds_url_for(uri))

        logger.debug("%s is not bridged, deferring to the original link", uri)
        return ResolutionResult.noop()

    async def resolve_direct(self, permalink: str) -> ResolutionResult:
        """Direct flow: the PDS URL, without consulting the bridge.

        Raises:
            ResolutionError: If the PDS URL cannot be resolved
        """
        uri = parse_permalink(permalink)
        if uri is None:
            return ResolutionResult.noop()
        return ResolutionResult.pds(await self.pds_url_for(uri))

    async def is_bridged(self, target: Union[str, AtUriComponents]) -> bool:
        uri = parse_permalink(target) if isinstance(target, str) else target
        if uri is None:
            return False
        return await self.bridge_probe.is_bridged(uri)

    async def resolve_did(self, uri: AtUriComponents) -> AtUriComponents:
        """Return ``uri`` with its authority replaced by the DID it refers to.

        Raises:
            HandleUnresolvedError: If the handle does not resolve
        """
        if uri.authority_is_did():
            return uri
        did = await self.handle_resolver.resolve(uri.authority)
        if did is None:
            raise HandleUnresolvedError(uri.authority)
        return uri.with_authority(did)

    async def pds_url_for(self, uri: AtUriComponents) -> str:
        """Resolve the XRPC URL for an account, collection or record on its PDS.

        Raises:
            ResolutionError: With the cause of the first failing step
        """
        uri = await self.resolve_did(uri)
        doc = await self.did_resolver.resolve(uri.authority)
        pds = locate_pds(doc)
        if pds is None:
            raise PdsNotFoundError(uri.authority)
        return pds_xrpc_url_for(pds, uri)

    async def handle(
        self, permalink: str, emit: EmitCallback, *, direct: bool = False
    ) -> ResolutionResult:
        """Run a flow for a UI caller and pass the result to ``emit``.

        Resolution failures are logged as warnings and emitted as a no-op result that
        carries the error, so the caller lets the original link proceed.
        """
        try:
            if direct:
                result = await self.resolve_direct(permalink)
            else:
                result = await self.resolve(permalink)
        except ResolutionError as e:
            logger.warning("Unable to resolve %s: %s", permalink, e)
            result = ResolutionResult.noop(error=e)

        emitted = emit(result)
        if inspect.isawaitable(emitted):
            await emitted
        return result
