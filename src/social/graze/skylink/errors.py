"""Resolution error taxonomy.

Every failure that the orchestrator surfaces to callers is a ``ResolutionError``. Each
message carries a stable error code so log lines can be grepped and grouped.
"""

from typing import Optional


class ResolutionError(Exception):
    """
    Base class for failures while turning a permalink into a PDS URL.

    A permalink that is simply not recognized is not an error; the parser returns
    ``None`` and the orchestrator produces a no-op result instead.
    """


class HandleUnresolvedError(ResolutionError):
    """Neither the DNS TXT record nor the well-known endpoint produced a DID."""

    def __init__(self, handle: str) -> None:
        super().__init__(f"error-skylink-1000 Unable to resolve handle at://{handle}")
        self.handle = handle


class UnsupportedDidMethodError(ResolutionError):
    """The DID uses a method other than did:plc or did:web."""

    def __init__(self, did: str) -> None:
        super().__init__(f"error-skylink-1001 Unsupported DID method: {did}")
        self.did = did


class HttpStatusError(ResolutionError):
    """The server answered a DID document request with a non-success status."""

    def __init__(self, url: str, status: int) -> None:
        super().__init__(
            f"error-skylink-1002 Encountered HTTP {status} status while fetching {url}"
        )
        self.url = url
        self.status = status


class MalformedDocumentError(ResolutionError):
    """The DID document was not JSON or did not have the expected shape."""

    def __init__(self, did: str, reason: Optional[str] = None) -> None:
        message = f"error-skylink-1003 Malformed DID document for {did}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.did = did


class DidResolutionNetworkError(ResolutionError):
    """The DID document request failed before a response was received."""

    def __init__(self, did: str) -> None:
        super().__init__(f"error-skylink-1004 Network failure while resolving {did}")
        self.did = did


class PdsNotFoundError(ResolutionError):
    """The DID document lists no AtprotoPersonalDataServer service."""

    def __init__(self, did: str) -> None:
        super().__init__(f"error-skylink-1005 Missing PDS for {did}")
        self.did = did
