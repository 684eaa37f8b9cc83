from typing import Optional

from social.graze.skylink.model.uri import AtUriComponents


def pds_xrpc_url(
    pds: str, did: str, collection: Optional[str] = None, rkey: Optional[str] = None
) -> str:
    """Build the com.atproto.repo query URL for a repository, collection or record.

    DIDs, collection NSIDs and record keys only use URL-safe characters, so the query
    parameters are written as-is.
    """
    base = f"{pds.rstrip('/')}/xrpc/com.atproto.repo"
    if collection is None:
        return f"{base}.describeRepo?repo={did}"
    if rkey is None:
        return f"{base}.listRecords?repo={did}&collection={collection}"
    return f"{base}.getRecord?repo={did}&collection={collection}&rkey={rkey}"


def pds_xrpc_url_for(pds: str, uri: AtUriComponents) -> str:
    if not uri.authority_is_did():
        raise ValueError(f"{uri} does not have a DID authority")
    return pds_xrpc_url(pds, uri.authority, uri.collection, uri.rkey)
