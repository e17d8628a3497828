"""
Base Schema Models

Defines the base class every wire model inherits from. The backend
abstraction service speaks camelCase JSON while the Python side uses
snake_case attributes; ``CanonicalModel`` bridges the two and provides
the serialization used for request bodies.

Core Classes:
    - CanonicalModel: camelCase-aliased Pydantic base model with wire serialization
    - ClientRequestHeader: Content-Type and bearer Authorization headers
    - ApiEnvelope: ``{success, data, message}`` wrapper returned by the backend

Dependencies:
    - pydantic: For data validation and serialization
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CanonicalModel(BaseModel):
    """
    camelCase-aliased Pydantic base model with wire serialization.

    Fields are declared in snake_case and populated from either the snake_case
    name or the camelCase alias, so payloads straight from the backend and
    keyword construction in Python both validate.

    Example:
        class MyModel(CanonicalModel):
            chain_id: int

        MyModel(chain_id=1).to_wire()       # {"chainId": 1}
        MyModel.model_validate({"chainId": 1})
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    def to_wire(self) -> Dict[str, Any]:
        """
        Convert model to the JSON-ready camelCase dict sent to the backend.

        Optional fields left unset are dropped so the backend never sees
        explicit ``null`` for values the caller did not provide.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ClientRequestHeader(BaseModel):
    """HTTP request headers sent by client.

    Attributes:
        content_type: MIME type of request body (default: application/json).
        authorization: Optional bearer token for authenticated requests.
    """
    model_config = ConfigDict(populate_by_name=True)
    content_type: str = Field(default="application/json", alias="Content-Type")
    authorization: Optional[str] = Field(default=None, alias="Authorization")


class ApiEnvelope(BaseModel):
    """Standard response wrapper: ``{"success": true, "data": {...}}``."""
    success: bool = True
    data: Any = None
    message: Optional[str] = None
