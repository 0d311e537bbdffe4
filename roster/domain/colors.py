"""Color-meaning registry: which role label each shift color stands for."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from roster.exceptions import RosterValidationError

PALETTE = (
    "blue",
    "green",
    "purple",
    "red",
    "yellow",
    "gray",
    "pink",
    "cyan",
    "orange",
    "indigo",
    "teal",
    "lime",
)

DEFAULT_FALLBACK_COLOR = "gray"


@dataclass(frozen=True)
class ColorMeaning:
    color: str
    meaning: str

    def to_dict(self) -> Dict[str, str]:
        return {"color": self.color, "meaning": self.meaning}

    @classmethod
    def from_dict(cls, raw: dict) -> "ColorMeaning":
        return cls(color=str(raw.get("color", "")), meaning=str(raw.get("meaning", "")))


class ColorMeaningRegistry:
    """
    Ordered set of color meanings, unique by ``meaning``.

    Shift colors are derived from it by role label; rename propagation
    compares two registries color by color.
    """

    def __init__(self, entries: Iterable[ColorMeaning] = (), fallback_color: str = DEFAULT_FALLBACK_COLOR):
        self.fallback_color = fallback_color
        self._entries: List[ColorMeaning] = []
        for entry in entries:
            # Keep first occurrence; later duplicates of a meaning are dropped.
            if self.find_by_meaning(entry.meaning) is None:
                self._entries.append(entry)

    def __iter__(self):
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ColorMeaningRegistry):
            return NotImplemented
        return self._entries == other._entries

    def find_by_meaning(self, meaning: str) -> Optional[ColorMeaning]:
        for entry in self._entries:
            if entry.meaning == meaning:
                return entry
        return None

    def color_for(self, role: str) -> str:
        """Color for a role label, or the fallback when no meaning matches."""
        entry = self.find_by_meaning(role)
        return entry.color if entry is not None else self.fallback_color

    def meanings(self) -> List[str]:
        return [entry.meaning for entry in self._entries]

    def add(self, color: str, meaning: str) -> ColorMeaning:
        if color not in PALETTE:
            raise RosterValidationError(f"Unknown color '{color}'")
        meaning = meaning.strip()
        if not meaning:
            raise RosterValidationError("Color meaning must not be empty")
        if self.find_by_meaning(meaning) is not None:
            raise RosterValidationError(f"Meaning '{meaning}' is already registered")
        entry = ColorMeaning(color=color, meaning=meaning)
        self._entries.append(entry)
        return entry

    def meanings_for_color(self, color: str) -> List[str]:
        return [entry.meaning for entry in self._entries if entry.color == color]

    def renames_to(self, new: "ColorMeaningRegistry") -> Dict[str, str]:
        """
        Role renames implied by replacing this registry with ``new``.

        Compared color by color. Meanings kept on a color are unchanged; the
        meanings a color lost are paired, in order, with the meanings it
        gained, and each pair is a rename. Unpaired leftovers are additions
        or removals and produce nothing. A color may carry several meanings,
        so every one of them takes part, not only the first.

        Returns:
            Dict of old meaning -> new meaning
        """
        renames: Dict[str, str] = {}
        for color in PALETTE:
            old_meanings = self.meanings_for_color(color)
            new_meanings = new.meanings_for_color(color)
            lost = [m for m in old_meanings if m not in new_meanings]
            gained = [m for m in new_meanings if m not in old_meanings]
            for old_meaning, new_meaning in zip(lost, gained):
                renames[old_meaning] = new_meaning
        return renames

    def to_list(self) -> List[Dict[str, str]]:
        return [entry.to_dict() for entry in self._entries]

    @classmethod
    def from_list(cls, raw: Iterable[dict], fallback_color: str = DEFAULT_FALLBACK_COLOR) -> "ColorMeaningRegistry":
        entries = [ColorMeaning.from_dict(item) for item in raw if isinstance(item, dict)]
        return cls(entries, fallback_color=fallback_color)
