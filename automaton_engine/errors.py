"""
Exception types for the automaton engine.
Builder and simulator failures are raised before any new value is built.
"""


class AutomatonError(ValueError):
    """Base class for every engine failure."""
    pass


class StructuralError(AutomatonError):
    """Raised when a builder operation would produce a malformed automaton."""
    pass


class SimulationError(AutomatonError):
    """Raised when an automaton cannot be executed on the given input."""
    pass
