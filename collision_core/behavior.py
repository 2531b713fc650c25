"""
Particle behaviour collaborators.
"""

from collision_core.interfaces import ParticleInterface


class NoSettlement:
    """Settlement behaviour that takes no action."""

    def apply(self, particle: ParticleInterface) -> None:
        pass

    def __repr__(self) -> str:
        return "NoSettlement()"
