"""Error tracking data models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from .severity import ComponentKind, SeverityCode, resolve_severity, severity_label


class OriginatingComponent(BaseModel):
    """Plugin, theme or core code an error was raised from."""

    model_config = ConfigDict(frozen=True)

    kind: ComponentKind
    identifier: str


class ErrorContext(BaseModel):
    """Request and reporting context captured alongside an error."""

    model_config = ConfigDict(frozen=True)

    actor_id: int = 0
    request_path: Optional[str] = None
    debug_mode: bool = False
    reporting_level: int = 0


class RequestContext(BaseModel):
    """Per-cycle request facts supplied by the host."""

    actor_id: int = 0  # 0 for anonymous requests
    request_path: Optional[str] = None


class ErrorRecord(BaseModel):
    """Classified error record. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    severity: SeverityCode
    message: str
    source_file: str
    line: int
    timestamp: datetime
    originating_component: OriginatingComponent
    context: ErrorContext

    @field_validator("severity", mode="before")
    @classmethod
    def _resolve_severity(cls, value):
        return resolve_severity(value)

    @field_serializer("severity")
    def _serialize_severity(self, value: SeverityCode):
        return severity_label(value)
