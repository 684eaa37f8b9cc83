"""JSON-LD value sets.

JSON-LD lets any property be written as a single value, an array of values, or null, and
arrays coming out of DID documents may contain null placeholders. ``as_ld_set`` lifts any
of those shapes into the ``One`` / ``Many`` variant so the rest of the code only deals
with ``values()`` and ``first()``.
"""

from typing import Any, Generic, List, Optional, TypeVar, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

T = TypeVar("T")


class One(BaseModel, Generic[T]):
    """A property written as a single value."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    value: T

    def values(self) -> List[Optional[T]]:
        return [self.value]

    def first(self) -> Optional[T]:
        return self.value


class Many(BaseModel, Generic[T]):
    """A property written as an array, possibly with null placeholders."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    items: List[Optional[T]]

    def values(self) -> List[Optional[T]]:
        return list(self.items)

    def first(self) -> Optional[T]:
        return next((item for item in self.items if item is not None), None)


def as_ld_set(value: Any) -> Any:
    """Lift a raw JSON value into the input shape of ``One`` or ``Many``.

    Used as a ``BeforeValidator`` on LD set fields. Values that are already a ``One`` or
    ``Many`` are passed through untouched.
    """
    if isinstance(value, (One, Many)):
        return value
    if value is None:
        return {"items": []}
    if isinstance(value, list):
        return {"items": value}
    return {"value": value}


def non_null(values: List[Optional[T]]) -> List[T]:
    return [value for value in values if value is not None]


class LdNode(BaseModel):
    """A node object identified by ``@id`` or ``id``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    node_id: str = Field(validation_alias=AliasChoices("@id", "id"))


LdId = Union[str, LdNode]
"""An identifier written either bare or wrapped in a node object."""


def ld_id_of(node: LdId) -> str:
    if isinstance(node, LdNode):
        return node.node_id
    return node
