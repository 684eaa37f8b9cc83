from dataclasses import dataclass, field
from typing import Dict, Optional, Set


@dataclass
class ResolutionCache:
    """
    Session-lifetime resolution state shared by concurrent resolutions.

    Both collections only ever grow. Entries are written after a positive confirmation
    only, so anything missing is looked up again on the next request. Writing the same
    key twice with the same value is harmless, which is what makes unsynchronized use
    from concurrent tasks on one event loop safe.

    Attributes:
        handles: Lowercased handle to DID
        bridged: Authorities (handles or DIDs) confirmed to be mirrored by the bridge
    """

    handles: Dict[str, str] = field(default_factory=dict)
    bridged: Set[str] = field(default_factory=set)

    def did_for_handle(self, handle: str) -> Optional[str]:
        return self.handles.get(handle.lower())

    def remember_handle(self, handle: str, did: str) -> None:
        self.handles[handle.lower()] = did

    def is_bridged(self, authority: str) -> bool:
        if authority in self.bridged:
            return True
        did = self.did_for_handle(authority)
        return did is not None and did in self.bridged

    def remember_bridged(self, authority: str) -> None:
        self.bridged.add(authority)
