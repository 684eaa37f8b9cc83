"""
Skylink - AT Protocol permalink resolution

This package resolves bsky.app style permalinks into something a fediverse client can
open: either a Bridgy Fed URL that exposes the account or post over ActivityPub, or an
XRPC URL on the Personal Data Server (PDS) that hosts the repository.

Key Components:
- model: Permalink components, DID document models and the session caches
- resolve: Handle and DID resolution against DNS, well-known endpoints and the PLC directory
- atproto: XRPC query URL construction and Bridgy Fed availability probing
- app: Configuration, the resolution orchestrator and the command line entry point

Resolution Flow:
1. Parse the permalink into an authority and, optionally, a collection and record key
2. For profiles and posts, ask the bridge whether the authority is mirrored
3. If it is, hand back the bridge URL
4. Otherwise, depending on the configured fallback behavior, resolve the handle to a DID,
   fetch the DID document, locate the PDS and build the XRPC URL

All network access is asynchronous (aiohttp). The only shared state is the pair of
append-only caches held by the orchestrator.
"""
