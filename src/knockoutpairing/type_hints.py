"""Type hints used in Knockout Pairing."""

from typing import Literal, Mapping, Tuple

# Match status literals (for type hints)
MatchStatus = Literal["pending", "in-progress", "finished"]

# Player name -> number of byes received
ByeHistory = Mapping[str, int]

# Two players facing each other
Pairing = Tuple[str, str]

#  LocalWords:  ByeHistory
