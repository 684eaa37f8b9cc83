"""
Skylink Data Models

This package holds the immutable values passed between the resolution stages and the
mutable session state shared by concurrent resolutions.

Key Components:
- uri.py: AtUriComponents and bsky.app permalink parsing
- ld.py: The One/Many variant used for JSON-LD values that may be single or repeated
- did.py: DID document and service entry models with structural validation
- cache.py: Handle-to-DID and bridged-authority caches

None of these models are persisted; they live for the lifetime of the process at most.
"""
