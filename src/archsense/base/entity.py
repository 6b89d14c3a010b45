"""Base entity class for named daemon components."""

from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class Entity(BaseModel):
    """Base class for named, long-lived components of the daemon.

    Processes and runners are entities: they carry a human-readable
    name used in log records and thread names, and a UUID that tells
    two instances with the same name apart. Configuration lives in
    pydantic fields; runtime collaborators (hardware handles, locks,
    threads) live in underscore attributes set after initialization.
    """

    model_config = ConfigDict(frozen=True)

    uuid: UUID = Field(
        default_factory=uuid4,
        description="Unique identifier for this entity",
    )
    name: str = Field(
        min_length=1, description="Human-readable name for this entity"
    )

    def __repr__(self) -> str:
        """Return string representation showing all fields."""
        fields: list[str] = []
        for field_name, field_value in self.model_dump().items():
            if isinstance(field_value, str):
                fields.append(f"{field_name}='{field_value}'")
            else:
                fields.append(f"{field_name}={field_value}")

        return f"{self.__class__.__name__}({', '.join(fields)})"


def describe(entity: Entity, **extra: Any) -> str:
    """Return a short "Class 'name'" label for log messages."""
    label = f"{entity.__class__.__name__} '{entity.name}'"
    if extra:
        details = ", ".join(f"{key}={value}" for key, value in extra.items())
        label = f"{label} ({details})"
    return label
