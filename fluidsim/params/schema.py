"""Parameter schema with validation. Units: grid cells, simulation time."""

from dataclasses import dataclass, field, asdict
from typing import Any

from fluidsim.core.errors import ConfigurationError
from fluidsim.kernels.advect import AdvectionScheme


class ValidationError(ValueError):
    """Parameter validation failed."""
    pass


def _positive(value: float, name: str) -> None:
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")


def _non_negative(value: float, name: str) -> None:
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")


def _count(value: int, name: str, minimum: int = 0) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ValidationError(f"{name} must be >= {minimum}, got {value}")


@dataclass(frozen=True)
class GridParams:
    """Grid: n (interior resolution per axis)."""
    n: int = 256

    def __post_init__(self) -> None:
        _count(self.n, "n", minimum=1)

    @property
    def padded(self) -> int:
        return self.n + 2


@dataclass(frozen=True)
class TimestepParams:
    """Timestep: dt (simulation time per tick, not wall-clock)."""
    dt: float = 0.01

    def __post_init__(self) -> None:
        _positive(self.dt, "dt")


@dataclass(frozen=True)
class DiffusionParams:
    """Density diffusion: coefficient [-], iterations (Jacobi rounds)."""
    coefficient: float = 1e-4
    iterations: int = 20

    def __post_init__(self) -> None:
        _non_negative(self.coefficient, "coefficient")
        _count(self.iterations, "iterations")


@dataclass(frozen=True)
class PressureParams:
    """Pressure solve: iterations (Jacobi rounds), decay of the previous guess."""
    iterations: int = 100
    decay: float = 0.0

    def __post_init__(self) -> None:
        _count(self.iterations, "iterations")
        if not 0 <= self.decay < 1:
            raise ValidationError(f"decay must be in [0, 1), got {self.decay}")


@dataclass(frozen=True)
class AdvectionParams:
    """Advection: scheme ('semi_lagrangian' or 'maccormack')."""
    scheme: str = "maccormack"

    def __post_init__(self) -> None:
        try:
            scheme = AdvectionScheme.parse(self.scheme)
        except ConfigurationError as e:
            raise ValidationError(str(e)) from None
        # Stored as the plain string so configs round-trip through YAML
        object.__setattr__(self, "scheme", scheme.value)


@dataclass(frozen=True)
class SplatParams:
    """Pointer splat: radius [cells] (None = n/50), amount [-], velocity_scale [-]."""
    radius: float | None = None
    amount: float = 1.0
    velocity_scale: float = 0.1

    def __post_init__(self) -> None:
        if self.radius is not None:
            _non_negative(self.radius, "radius")
        _non_negative(self.amount, "amount")
        _non_negative(self.velocity_scale, "velocity_scale")


@dataclass(frozen=True)
class SeedParams:
    """Initial blob: radius [cells], density [-], velocity_x/velocity_y."""
    radius: float = 20.0
    density: float = 1.0
    velocity_x: float = 1.0
    velocity_y: float = 0.0

    def __post_init__(self) -> None:
        _non_negative(self.radius, "radius")
        _non_negative(self.density, "density")


@dataclass(frozen=True)
class SimulationConfig:
    """Complete simulation configuration."""

    grid: GridParams = field(default_factory=GridParams)
    timestep: TimestepParams = field(default_factory=TimestepParams)
    diffusion: DiffusionParams = field(default_factory=DiffusionParams)
    pressure: PressureParams = field(default_factory=PressureParams)
    advection: AdvectionParams = field(default_factory=AdvectionParams)
    splat: SplatParams = field(default_factory=SplatParams)
    seed: SeedParams = field(default_factory=SeedParams)

    def to_dict(self) -> dict[str, Any]:
        """Convert to nested dictionary."""
        return {
            "grid": asdict(self.grid),
            "timestep": asdict(self.timestep),
            "diffusion": asdict(self.diffusion),
            "pressure": asdict(self.pressure),
            "advection": asdict(self.advection),
            "splat": asdict(self.splat),
            "seed": asdict(self.seed),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SimulationConfig":
        """Create from nested dictionary."""
        param_classes = {
            "grid": GridParams,
            "timestep": TimestepParams,
            "diffusion": DiffusionParams,
            "pressure": PressureParams,
            "advection": AdvectionParams,
            "splat": SplatParams,
            "seed": SeedParams,
        }
        unknown = set(data) - set(param_classes)
        if unknown:
            raise ValidationError(f"Unknown parameter groups: {sorted(unknown)}")
        try:
            kwargs = {k: param_classes[k](**(data[k] or {})) for k in data}
        except TypeError as e:
            raise ValidationError(str(e)) from e
        return cls(**kwargs)

    def with_updates(self, **kwargs: Any) -> "SimulationConfig":
        """Create new config with updates."""
        current = self.to_dict()
        for key, value in kwargs.items():
            if key not in current:
                raise ValidationError(f"Unknown parameter group: {key}")
            if isinstance(value, dict):
                current[key].update(value)
            else:
                current[key] = asdict(value)
        return self.from_dict(current)

    # Convenience accessors
    @property
    def n(self) -> int:
        return self.grid.n

    @property
    def dt(self) -> float:
        return self.timestep.dt

    @property
    def splat_radius(self) -> float:
        """Splat radius in cells, defaulting to n / 50."""
        if self.splat.radius is None:
            return self.grid.n / 50.0
        return self.splat.radius
