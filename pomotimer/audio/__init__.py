"""Audio package."""

from .sounds import SoundManager, generate_chime

__all__ = ["SoundManager", "generate_chime"]
