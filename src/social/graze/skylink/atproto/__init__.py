"""
AT Protocol Endpoints

This package builds the URLs the engine hands back to callers and probes the bridge that
decides which kind of URL is preferred.

Key Components:
- pds.py: com.atproto.repo XRPC query URLs (describeRepo, listRecords, getRecord)
- bridge.py: Bridgy Fed URLs and the cached "is this authority bridged" probe

Bridge URLs are preferred for accounts and posts when the bridge confirms it mirrors the
authority. XRPC URLs on the account's PDS are the fallback, and the only option for record
kinds the bridge has no representation for (feed generators, for example).
"""
