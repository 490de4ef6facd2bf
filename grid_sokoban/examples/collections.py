"""Built-in tutorial collection.

Small hand-made levels that introduce pushing one step at a time. Used by the
Gymnasium wrapper's examples and by the test-suite.
"""

from __future__ import annotations

from grid_sokoban.levels.collection import LevelCollection

TUTORIAL_ID = 0

# L0: one push straight down onto the target.
LEVEL_ONE_PUSH = """\
###
#@#
#$#
#.#
###"""

# L1: push the object twice along a row.
LEVEL_ROW_PUSH = """\
######
#    #
#@$ .#
#    #
######"""

# L2: two objects pushed in different directions.
LEVEL_TWO_OBJECTS = """\
#######
#.    #
#$ @$.#
#     #
#######"""

# L3: the object goes right, up twice, then right onto the target.
LEVEL_CORNER = """\
 #####
##  .#
#   ##
# $ #
#@  #
#####"""

TUTORIAL_LEVELS = [
    LEVEL_ONE_PUSH,
    LEVEL_ROW_PUSH,
    LEVEL_TWO_OBJECTS,
    LEVEL_CORNER,
]


def build_tutorial_collection() -> LevelCollection:
    """Return a fresh tutorial collection (progress starts at zero)."""
    return LevelCollection(name="Tutorial", id=TUTORIAL_ID, levels=list(TUTORIAL_LEVELS))
