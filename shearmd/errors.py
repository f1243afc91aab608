"""Error kinds raised by shearmd."""


class ShearMDError(Exception):
    """Base class for all shearmd errors."""


class ConfigurationError(ShearMDError, ValueError):
    """
    Invalid setup: bad shell index, badly spaced cutoffs, bad run parameters.

    Indicates a programming or setup defect; never retried.
    """


class OverlapError(ShearMDError, RuntimeError):
    """
    Two particles came closer than the potential's overlap threshold.

    The energies and forces of the evaluation that detected the overlap are
    invalid and the run cannot continue.
    """


class PropagatorSingularError(ShearMDError, ArithmeticError):
    """An isokinetic propagator is undefined for the current velocities."""
