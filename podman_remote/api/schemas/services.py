"""Pydantic schemas for the systemd service endpoints."""

from enum import StrEnum, auto

from pydantic import BaseModel, ConfigDict, Field


class ServiceCommand(StrEnum):
    """Lifecycle command accepted by PUT /services/{name}.

    - START / STOP / RESTART: queue the matching job, replacing conflicting jobs
    - ENABLE / DISABLE: toggle the unit file's install state (persistent)
    """

    START = auto()
    STOP = auto()
    RESTART = auto()
    ENABLE = auto()
    DISABLE = auto()


class UpdateServiceRequest(BaseModel):
    """Command to apply to a service unit."""

    model_config = ConfigDict(json_schema_extra={"example": {"command": "restart"}})

    command: ServiceCommand


class ServiceInfo(BaseModel):
    """Live state of a service unit as reported by the manager.

    State fields carry systemd's own lowercase strings verbatim (``active``,
    ``running``, ``loaded``), not capitalized enum names such as ``Active``.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "nginx.service",
                "active_state": "active",
                "sub_state": "running",
                "load_state": "loaded",
            }
        }
    )

    name: str = Field(..., description="Fully-qualified unit name")
    active_state: str = Field(
        ...,
        description="ActiveState, lowercase as systemd reports it (e.g. active, inactive, failed)",
    )
    sub_state: str = Field(
        ...,
        description="SubState, lowercase as systemd reports it (e.g. running, dead, exited)",
    )
    load_state: str = Field(
        ...,
        description="LoadState, lowercase as systemd reports it (e.g. loaded, not-found, masked)",
    )
