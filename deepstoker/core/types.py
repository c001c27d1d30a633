# deepstoker/core/types.py
"""Value types shared by configuration and the reactor engine."""

from enum import Enum


class ReactorType(Enum):
    """Reactor core variants unlocked by clearance upgrades."""
    CIRCLE = "circle"
    STAR = "star"
    PRISM = "prism"
    SINGULARITY = "singularity"
