"""Temperature to fan-duty mapping by piecewise-linear interpolation."""

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

ControlPoint = tuple[float, int]


def compute_duty(temperature: float, curve: "FanCurve | Sequence[ControlPoint]") -> int:
    """Return the fan duty percentage for a temperature.

    Below the first control point the first duty applies, at or above
    the last point the last duty applies, and in between the duty is
    interpolated linearly between the bracketing pair and truncated.

    Args:
        temperature: Temperature in degrees Celsius
        curve: Control points with strictly increasing temperatures

    Returns:
        Duty cycle in percent

    """
    points = curve.points if isinstance(curve, FanCurve) else curve
    if not points:
        raise ValueError("fan curve has no control points")

    first_temp, first_duty = points[0]
    last_temp, last_duty = points[-1]
    if temperature <= first_temp:
        return int(first_duty)
    if temperature >= last_temp:
        return int(last_duty)

    for (t1, f1), (t2, f2) in zip(points, points[1:]):
        if t1 <= temperature <= t2:
            if temperature == t2 or t1 == t2:
                return int(f2)
            fraction = (temperature - t1) / (t2 - t1)
            return int(f1 + fraction * (f2 - f1))

    # Only reachable with unsorted points
    raise ValueError(f"fan curve does not bracket {temperature}")


class FanCurve(BaseModel):
    """Immutable fan calibration table.

    Construction fails for an empty table, temperatures that do not
    strictly increase, duties outside 0-100, or duties that fall as the
    temperature rises. A bad table is a configuration error surfaced at
    startup, never at runtime.
    """

    model_config = ConfigDict(frozen=True)

    points: tuple[ControlPoint, ...] = Field(
        min_length=1, description="(temperature C, duty %) control points"
    )

    @field_validator("points")
    @classmethod
    def _check_points(
        cls, points: tuple[ControlPoint, ...]
    ) -> tuple[ControlPoint, ...]:
        for temperature, duty in points:
            if not 0 <= duty <= 100:
                raise ValueError(f"duty {duty}% at {temperature}C is not 0-100")
        for (t1, f1), (t2, f2) in zip(points, points[1:]):
            if t2 <= t1:
                raise ValueError(
                    f"temperatures must strictly increase ({t1} then {t2})"
                )
            if f2 < f1:
                raise ValueError(f"duty must not fall ({f1}% then {f2}%)")
        return points

    def duty_at(self, temperature: float) -> int:
        return compute_duty(temperature, self.points)


DEFAULT_FAN_CURVE = FanCurve(
    points=(
        (40, 20),  # quiet at idle
        (55, 40),
        (70, 65),
        (85, 100),  # full speed from here up
    )
)
