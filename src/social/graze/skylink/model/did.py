"""DID document models.

Only the parts of a DID document needed to find the PDS are modelled. Validation is
structural: the document must carry an identifier, and every service entry must carry a
type set and an endpoint set made of strings or ``@id`` nodes. A document that fails
validation is never handed to the PDS locator.
"""

from typing import Annotated, List, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
)

from social.graze.skylink.model.ld import LdId, Many, One, as_ld_set, non_null

TypeSet = Annotated[Union[One[str], Many[str]], BeforeValidator(as_ld_set)]
EndpointSet = Annotated[Union[One[LdId], Many[LdId]], BeforeValidator(as_ld_set)]


class ServiceEntry(BaseModel):
    """A DID document service entry.

    Both ``type`` and ``serviceEndpoint`` must hold at least one non-null value.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: TypeSet = Field(validation_alias=AliasChoices("type", "@type"))
    service_endpoint: EndpointSet = Field(validation_alias="serviceEndpoint")

    @field_validator("type", "service_endpoint")
    @classmethod
    def require_value(cls, v: Union[One, Many]) -> Union[One, Many]:
        if v.first() is None:
            raise ValueError("must contain at least one non-null value")
        return v

    def types(self) -> List[str]:
        return non_null(self.type.values())


ServiceSet = Annotated[
    Union[One[ServiceEntry], Many[ServiceEntry]], BeforeValidator(as_ld_set)
]


class DidDocument(BaseModel):
    """A validated DID document."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(validation_alias=AliasChoices("id", "@id"))
    service: ServiceSet = Field(default_factory=lambda: Many(items=[]))

    def services(self) -> List[ServiceEntry]:
        return non_null(self.service.values())
