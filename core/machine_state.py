"""
Machine state management for the G-code interpreter.
Tracks the last value written for every letter plus the modal flags.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
from core.canonical import MotionType
from core.lexer import Letter, Number
from utils.geometry import Point3D


class DistanceMode(Enum):
    ABSOLUTE = "G90"
    RELATIVE = "G91"


# Letters that always hold a value once the state is created
SEEDED_LETTERS = (Letter.X, Letter.Y, Letter.Z, Letter.F, Letter.I, Letter.J)


class MachineState:
    """
    Persistent state for one interpreter run.

    Letter values live in a fixed-size list indexed by Letter.ordinal, so
    every letter has a slot and the seeded letters can never be missing.
    """

    def __init__(self):
        self.values: List[Optional[Number]] = [None] * len(Letter)
        for letter in SEEDED_LETTERS:
            self.values[letter.ordinal] = 0.0

        # Modal flags
        self.motion_mode = MotionType.RAPID
        self.distance_mode = DistanceMode.ABSOLUTE

    def get(self, letter: Letter) -> Optional[Number]:
        """Last value written for a letter, or None if never set."""
        return self.values[letter.ordinal]

    def get_float(self, letter: Letter) -> float:
        """Last value for a seeded letter, widened to float."""
        value = self.values[letter.ordinal]
        if value is None:
            raise KeyError(f"No value recorded for {letter.value}")
        return float(value)

    def lookup(self, letter: Letter, delta: Dict[Letter, Number]) -> float:
        """Value from this line's words if present, else the persistent one."""
        if letter in delta:
            return float(delta[letter])
        return self.get_float(letter)

    def merge(self, delta: Dict[Letter, Number]):
        """Write a line's staged words into the persistent table."""
        for letter, number in delta.items():
            self.values[letter.ordinal] = number

    @property
    def current_position(self) -> Point3D:
        return Point3D(
            self.get_float(Letter.X),
            self.get_float(Letter.Y),
            self.get_float(Letter.Z),
        )

    def is_distance_mode_absolute(self) -> bool:
        """Check if distance mode is absolute (G90)."""
        return self.distance_mode is DistanceMode.ABSOLUTE

    def get_state_summary(self) -> Dict[str, Any]:
        """Get a summary of the current machine state for debugging."""
        return {
            'position': self.current_position.to_list(),
            'feed_rate': self.get_float(Letter.F),
            'motion_mode': self.motion_mode.value,
            'distance_mode': self.distance_mode.value,
            'words': {letter.value: self.values[letter.ordinal]
                      for letter in Letter if self.values[letter.ordinal] is not None},
        }


@dataclass
class LineContext:
    """Per-line scratch state: staged words and non-modal flags."""
    line_number: int
    delta: Dict[Letter, Number] = field(default_factory=dict)

    # Non-modal flags, reset for every line
    machine_coordinates: bool = False
    program_end: bool = False

    def stage(self, letter: Letter, number: Number):
        """Stage a non-command word; a later duplicate overwrites it."""
        self.delta[letter] = number

    def has_axis_words(self) -> bool:
        return any(axis in self.delta for axis in (Letter.X, Letter.Y, Letter.Z))
