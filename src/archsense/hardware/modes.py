"""Fan and lighting modes shared by configuration and protocol."""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .lighting import DIRECTIONS, EFFECTS, PALETTE, RANDOM_COLOR, Rgb


class FanModeKind(str, Enum):
    """Named fan modes understood by the daemon."""

    AUTO = "auto"
    QUIET = "quiet"
    BALANCED = "balanced"
    PERFORMANCE = "performance"
    TURBO = "turbo"
    CUSTOM = "custom"


PRESET_DUTIES: dict[FanModeKind, tuple[int, int]] = {
    FanModeKind.AUTO: (0, 0),
    FanModeKind.QUIET: (30, 30),
    FanModeKind.BALANCED: (50, 50),
    FanModeKind.PERFORMANCE: (70, 70),
    FanModeKind.TURBO: (100, 100),
}


class FanMode(BaseModel):
    """Fan mode: a named preset, or custom CPU/GPU duty percentages.

    In auto mode the background controller owns the duty cycle; every
    other mode is a fixed duty written once when the mode is chosen.
    """

    model_config = ConfigDict(frozen=True)

    kind: FanModeKind = FanModeKind.AUTO
    cpu: int | None = Field(default=None, ge=0, le=100)
    gpu: int | None = Field(default=None, ge=0, le=100)

    @model_validator(mode="after")
    def _check_duties(self) -> "FanMode":
        has_duties = self.cpu is not None or self.gpu is not None
        if self.kind is FanModeKind.CUSTOM:
            if self.cpu is None or self.gpu is None:
                raise ValueError("custom fan mode needs both cpu and gpu")
        elif has_duties:
            raise ValueError(f"{self.kind.value} fan mode takes no duties")
        return self

    @classmethod
    def auto(cls) -> "FanMode":
        return cls(kind=FanModeKind.AUTO)

    @classmethod
    def custom(cls, cpu: int, gpu: int) -> "FanMode":
        return cls(kind=FanModeKind.CUSTOM, cpu=cpu, gpu=gpu)

    @property
    def is_auto(self) -> bool:
        return self.kind is FanModeKind.AUTO

    def duties(self) -> tuple[int, int]:
        """Return the (cpu, gpu) pair written to the fan_speed attribute."""
        if self.cpu is not None and self.gpu is not None:
            return self.cpu, self.gpu
        return PRESET_DUTIES[self.kind]

    def __str__(self) -> str:
        if self.kind is FanModeKind.CUSTOM:
            return f"custom ({self.cpu}%/{self.gpu}%)"
        return self.kind.value


class SolidColor(BaseModel):
    """Every key lit in one palette colour."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["solid"] = "solid"
    color: str

    @field_validator("color")
    @classmethod
    def _known_color(cls, value: str) -> str:
        if value not in PALETTE:
            raise ValueError(f"unknown color '{value}'")
        return value

    def rgb(self) -> Rgb:
        return PALETTE[self.color]

    def __str__(self) -> str:
        return f"solid {self.color}"


class CustomColor(BaseModel):
    """Every key lit in an arbitrary RGB colour."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["custom"] = "custom"
    red: int = Field(ge=0, le=255)
    green: int = Field(ge=0, le=255)
    blue: int = Field(ge=0, le=255)

    def rgb(self) -> Rgb:
        return self.red, self.green, self.blue

    def __str__(self) -> str:
        return f"RGB({self.red},{self.green},{self.blue})"


class Animation(BaseModel):
    """A firmware animation effect.

    Speed and brightness are kept alongside the mode in the daemon
    configuration so the brightness keys work for every mode alike.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["animation"] = "animation"
    effect: str
    direction: str = "right"
    color: str | None = None

    @field_validator("effect")
    @classmethod
    def _known_effect(cls, value: str) -> str:
        if value not in EFFECTS:
            raise ValueError(f"unsupported effect '{value}'")
        return value

    @field_validator("direction")
    @classmethod
    def _known_direction(cls, value: str) -> str:
        if value not in DIRECTIONS:
            raise ValueError(f"unknown direction '{value}'")
        return value

    @field_validator("color")
    @classmethod
    def _known_color(cls, value: str | None) -> str | None:
        if value is not None and value != RANDOM_COLOR and value not in PALETTE:
            raise ValueError(f"unknown color '{value}'")
        return value

    def __str__(self) -> str:
        return self.effect


RgbMode = Annotated[
    Union[SolidColor, CustomColor, Animation],
    Field(discriminator="kind"),
]
