"""
Identity Resolution

This package provides utilities for resolving AT Protocol identifiers (handles, DIDs)
to the DID documents and Personal Data Servers behind them.

Key Components:
- handle.py: Handle resolution (DNS-over-HTTPS TXT record, then well-known endpoint)
- did.py: DID document fetching, validation and PDS discovery
- flight.py: Coalescing of identical lookups that run concurrently
- http.py: Client session factory and status helpers
- __main__.py: CLI interface for resolution

Resolution Types:
1. Handle Resolution
   - DNS-based resolution via TXT records (_atproto.{handle}) over cloudflare-dns.com
   - HTTP-based resolution via well-known endpoints (.well-known/atproto-did)

2. DID Resolution
   - did:plc method resolution via PLC directory
   - did:web method resolution via well-known endpoints

Handle lookups never raise; a handle that cannot be resolved is simply None. DID document
lookups raise ResolutionError subclasses describing what went wrong.
"""
