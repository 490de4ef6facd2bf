"""Exception hierarchy.

User-driven failures (walking into a wall, undo on an empty history, a bad
bookmark) are reported through return values and never raise. The classes
below cover structural problems: unparsable level or history text, and
misuse of the engine's building blocks.
"""


class SokobanError(Exception):
    """Base class for all engine errors."""


class LevelFormatError(SokobanError, ValueError):
    """Level text cannot be parsed or describes an unplayable level."""


class MoveError(SokobanError, ValueError):
    """A move, grid or sequence operation was called against its contract."""


class HistoryFormatError(SokobanError, ValueError):
    """Serialized history text is malformed."""
