"""AT URI components and bsky.app permalink parsing.

Turns ``https://bsky.app/profile/<authority>[/<kind>/<rkey>]`` into an authority with an
optional collection and record key.
"""

from typing import Final, Mapping, Optional

from pydantic import BaseModel, ConfigDict, model_validator
from yarl import URL

DID_PREFIX: Final = "did:"

POST_COLLECTION: Final = "app.bsky.feed.post"
FEED_GENERATOR_COLLECTION: Final = "app.bsky.feed.generator"

PERMALINK_COLLECTIONS: Final[Mapping[str, str]] = {
    "post": POST_COLLECTION,
    "feed": FEED_GENERATOR_COLLECTION,
}
"""Permalink path discriminators that map onto a record collection."""


def is_did(value: str) -> bool:
    """Check if value is a DID rather than a handle.

    Args:
        value: Authority string to check

    Returns:
        True if value starts with the did: prefix
    """
    return value is not None and value.startswith(DID_PREFIX)


class AtUriComponents(BaseModel):
    """Authority, collection and record key of an AT URI.

    A record key is only meaningful inside a collection, so ``rkey`` without
    ``collection`` is rejected.
    """

    model_config = ConfigDict(frozen=True)

    authority: str
    collection: Optional[str] = None
    rkey: Optional[str] = None

    @model_validator(mode="after")
    def check_rkey_has_collection(self) -> "AtUriComponents":
        if self.rkey is not None and self.collection is None:
            raise ValueError("rkey requires a collection")
        return self

    def authority_is_did(self) -> bool:
        return is_did(self.authority)

    def with_authority(self, authority: str) -> "AtUriComponents":
        return self.model_copy(update={"authority": authority})

    def __str__(self) -> str:
        ret = f"at://{self.authority}"
        if self.collection is not None:
            ret += f"/{self.collection}"
            if self.rkey is not None:
                ret += f"/{self.rkey}"
        return ret


def parse_permalink(permalink: str) -> Optional[AtUriComponents]:
    """Parse a bsky.app style profile permalink.

    Only ``/profile/<authority>`` links are recognized. A kind segment without a record
    key is treated as a link to the profile itself. With a record key, only the kinds in
    ``PERMALINK_COLLECTIONS`` are understood; anything else is not a match.

    Args:
        permalink: Absolute permalink URL

    Returns:
        AtUriComponents, or None if the link is not a recognized permalink
    """
    try:
        parts = URL(permalink).parts
    except (TypeError, ValueError):
        return None

    # parts of an absolute path start with "/"
    segments = [part for part in parts if part != "/"]
    if len(segments) < 2 or segments[0] != "profile":
        return None

    authority = segments[1]
    if not authority:
        return None

    kind = segments[2] if len(segments) > 2 else ""
    rkey = segments[3] if len(segments) > 3 else ""
    if not kind or not rkey:
        return AtUriComponents(authority=authority)

    collection = PERMALINK_COLLECTIONS.get(kind)
    if collection is None:
        return None
    return AtUriComponents(authority=authority, collection=collection, rkey=rkey)
