"""Exception types shared across the solver."""


class ConfigurationError(ValueError):
    """A stage was asked to operate on a field layout it does not support."""
    pass


class SimulationHaltedError(RuntimeError):
    """A previous tick failed; the simulation cannot continue."""
    pass
