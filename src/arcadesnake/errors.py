"""
errors.py

Programming errors detected by the simulation. Illegal player input and
collisions are normal outcomes and never raise.
"""

class SimulationError(RuntimeError):
    """Base class for misuse of the simulation engine"""

class IllegalTickError(SimulationError):
    """A movement tick was requested after the run ended"""

class ConcurrentMutationError(SimulationError):
    """Two mutators touched the run state at the same time"""
