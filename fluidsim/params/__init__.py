"""
Parameter management module for fluidsim.

This module provides:
- Validated, immutable parameter containers (schema.py)
- YAML loading utilities (loader.py)
"""

from fluidsim.params.schema import (
    AdvectionParams,
    DiffusionParams,
    GridParams,
    PressureParams,
    SeedParams,
    SimulationConfig,
    SplatParams,
    TimestepParams,
    ValidationError,
)
from fluidsim.params.loader import (
    load_config,
    load_config_with_overrides,
    save_config,
)

__all__ = [
    # Schema classes
    "AdvectionParams",
    "DiffusionParams",
    "GridParams",
    "PressureParams",
    "SeedParams",
    "SimulationConfig",
    "SplatParams",
    "TimestepParams",
    "ValidationError",
    # Loader functions
    "load_config",
    "load_config_with_overrides",
    "save_config",
]
