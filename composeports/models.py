"""Records passed between the pipeline stages."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True)
class PipelineError:
    """A failure carried through the pipeline as data."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ServiceFileRecord:
    path: str
    services: Mapping[str, Any] = field(default_factory=dict)
    error: Optional[PipelineError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ExposedService:
    name: str
    ports: str  # already joined with " and "


@dataclass(frozen=True)
class ExposedServiceRecord:
    path: str
    exposed_services: Tuple[ExposedService, ...] = ()
    error: Optional[PipelineError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
