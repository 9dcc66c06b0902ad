"""Common schema base classes."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base model serialized with camelCase keys for the browser client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Envelope(APIModel):
    """Response envelope shared by every endpoint."""
    success: bool = True


class MessageResponse(Envelope):
    """Envelope with a human-readable message only."""
    message: str
