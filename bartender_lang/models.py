from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class Vessel(Enum):
    PINT = "pint"
    BOWL = "bowl"
    SPOON = "spoon"
    GLASS = "glass"
    CUP = "cup"
    PITCHER = "pitcher"
    MAGNUM = "magnum"
    BOTTLE = "bottle"

    @classmethod
    def from_word(cls, word: str) -> "Vessel":
        try:
            return cls[word.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown vessel: {word!r}") from None


@dataclass(frozen=True)
class Order:
    vessel: Optional[Vessel] = None
    description: str = ""
    terminal: bool = False

    def __post_init__(self):
        populated = self.vessel is not None and bool(self.description)
        if self.terminal and (self.vessel is not None or self.description):
            raise ValueError("A terminal order carries no vessel or description")
        if not self.terminal and not populated:
            raise ValueError("An order needs both a vessel and a description")

    @classmethod
    def last_call(cls) -> "Order":
        return cls(terminal=True)

    def confirmation(self) -> str:
        if self.terminal:
            raise ValueError("Nothing to confirm on a terminal order")
        return (
            f"Here's your {self.vessel.value} of {self.description}. "
            "Please drink responsibly!"
        )


@dataclass(frozen=True)
class Vocabulary:
    articles: Tuple[str, ...] = ("a", "an", "the")
    vessels: Tuple[str, ...] = tuple(v.value for v in Vessel)
    politeness: Tuple[str, ...] = ("please", "pls", "okay", "ok", "yo")
    cancellations: Tuple[str, ...] = ("nothing", "nada", "zilch", "done")

    def __post_init__(self):
        for word in self.vessels:
            Vessel.from_word(word)

    @classmethod
    def default(cls) -> "Vocabulary":
        return cls()

    @classmethod
    def with_vessels(cls, *vessels: Vessel) -> "Vocabulary":
        return cls(vessels=tuple(v.value for v in vessels))

    def as_tables(self) -> Dict[str, Tuple[str, ...]]:
        return {
            "articles": self.articles,
            "vessels": self.vessels,
            "politeness": self.politeness,
            "cancellations": self.cancellations,
        }
