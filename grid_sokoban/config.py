"""Engine configuration.

The engine has no notion of wall-clock time. ``anim_delay`` only selects
between the synchronous fast path (0) and stepwise playback, and tells the
external timer how often to call :meth:`grid_sokoban.engine.GameEngine.tick`.
"""

from dataclasses import dataclass
from typing import Tuple

# Tick interval in milliseconds per animation setting (0 = no animation).
ANIM_DELAYS: Tuple[int, ...] = (0, 15, 35, 60)


@dataclass(frozen=True)
class EngineConfig:
    """Explicit configuration passed into :class:`GameEngine`.

    Attributes:
        anim_delay: Index into :data:`ANIM_DELAYS`. ``0`` resolves every
            committed move synchronously.
    """

    anim_delay: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.anim_delay < len(ANIM_DELAYS):
            raise ValueError(
                f"anim_delay must be in 0..{len(ANIM_DELAYS) - 1}, got {self.anim_delay}"
            )

    @property
    def animated(self) -> bool:
        return self.anim_delay != 0

    @property
    def tick_interval_ms(self) -> int:
        """Cadence at which an external timer should call ``tick()``."""
        return ANIM_DELAYS[self.anim_delay]
