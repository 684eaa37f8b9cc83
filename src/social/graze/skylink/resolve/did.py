"""DID document resolution and PDS discovery.

Fetches DID documents for the two DID methods sanctioned by the AT Protocol (did:plc via
the PLC directory, did:web via the domain's well-known did.json), validates them, and
finds the Personal Data Server endpoint.
"""

import asyncio
import logging
from typing import Any, Final, Optional

from aiohttp import ClientError, ClientSession, hdrs
from pydantic import ValidationError

from social.graze.skylink.errors import (
    DidResolutionNetworkError,
    HttpStatusError,
    MalformedDocumentError,
    UnsupportedDidMethodError,
)
from social.graze.skylink.model.did import DidDocument
from social.graze.skylink.model.ld import ld_id_of
from social.graze.skylink.resolve.http import is_success

logger = logging.getLogger(__name__)

PLC_DIRECTORY: Final = "https://plc.directory"
DID_DOCUMENT_CONTENT_TYPE: Final = "application/did+ld+json"
PDS_SERVICE_TYPE: Final = "AtprotoPersonalDataServer"

DID_PLC_PREFIX: Final = "did:plc:"
DID_WEB_PREFIX: Final = "did:web:"


def did_document_url(did: str) -> str:
    """Build the URL a DID document is fetched from.

    Args:
        did: did:plc or did:web DID

    Returns:
        The PLC directory URL or the did:web well-known URL

    Raises:
        UnsupportedDidMethodError: For any other DID method, or a path-based did:web
    """
    if did.startswith(DID_PLC_PREFIX):
        return f"{PLC_DIRECTORY}/{did}"
    if did.startswith(DID_WEB_PREFIX):
        domain = did.removeprefix(DID_WEB_PREFIX)
        # did:web paths are not used by the AT Protocol
        if not domain or ":" in domain:
            raise UnsupportedDidMethodError(did)
        domain = domain.replace("%3A", ":").replace("%3a", ":")
        return f"https://{domain}/.well-known/did.json"
    raise UnsupportedDidMethodError(did)


def parse_did_document(did: str, body: Any) -> DidDocument:
    """Validate a decoded DID document.

    Raises:
        MalformedDocumentError: If the document does not have the expected shape
    """
    try:
        return DidDocument.model_validate(body)
    except ValidationError as e:
        raise MalformedDocumentError(
            did, f"{e.error_count()} validation error(s)"
        ) from e


def locate_pds(doc: DidDocument) -> Optional[str]:
    """Find the PDS endpoint in a DID document.

    Uses the first service typed AtprotoPersonalDataServer, and the first non-null
    endpoint of that service.

    Args:
        doc: Validated DID document

    Returns:
        PDS endpoint URL, or None if the document lists no PDS
    """
    for service in doc.services():
        if PDS_SERVICE_TYPE in service.types():
            endpoint = service.service_endpoint.first()
            if endpoint is not None:
                return ld_id_of(endpoint)
    return None


class DidDocumentResolver:
    """Fetches and validates DID documents."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def resolve(self, did: str) -> DidDocument:
        """Resolve a DID to its validated document.

        Raises:
            UnsupportedDidMethodError: DID method is not plc or web; nothing is fetched
            HttpStatusError: The document request returned a non-success status
            MalformedDocumentError: The body is not JSON or fails validation
            DidResolutionNetworkError: The request failed without a response
        """
        url = did_document_url(did)
        try:
            async with self.session.get(
                url, headers={hdrs.ACCEPT: DID_DOCUMENT_CONTENT_TYPE}
            ) as resp:
                if not is_success(resp.status):
                    raise HttpStatusError(url, resp.status)
                body = await resp.json(content_type=None)
        except (ClientError, asyncio.TimeoutError) as e:
            raise DidResolutionNetworkError(did) from e
        except ValueError as e:
            raise MalformedDocumentError(did, "response is not JSON") from e

        doc = parse_did_document(did, body)
        logger.debug("Resolved DID document for %s", did)
        return doc
