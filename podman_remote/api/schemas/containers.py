"""Pydantic schemas for the container endpoints.

Container summaries and inspect responses are relayed exactly as the engine
returns them, so only the request body has a schema here.
"""

from pydantic import BaseModel, ConfigDict, Field


class UpdateContainerRequest(BaseModel):
    """Desired run state for a container."""

    model_config = ConfigDict(json_schema_extra={"example": {"running": True}})

    running: bool = Field(
        ...,
        description="true ensures the container is started, false ensures it is stopped",
    )
