"""Core data structures for the classification gateway."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, List, Union

UNDETERMINED = "und"
"""Language code the detector (and the fast-fail path) use for 'no answer'."""


class ReadinessState(str, Enum):
    """Where the detector is in its load / serve / dispose cycle."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"
    DISPOSED = "disposed"


@dataclass(frozen=True)
class LanguageGuess:
    """A single language guess as reported by the detector."""

    language: str
    probability: float
    is_reliable: bool
    proportion: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def undetermined(cls) -> LanguageGuess:
        return cls(language=UNDETERMINED, probability=0, is_reliable=False, proportion=0)


ClassificationResult = Union[LanguageGuess, List[LanguageGuess]]
"""A single guess for topN == 1, a ranked list otherwise."""


@dataclass(frozen=True)
class ClassificationResponse:
    """What /classify returns and what the cache stores."""

    input_len: int
    cld3: ClassificationResult

    def to_dict(self) -> Dict[str, Any]:
        if isinstance(self.cld3, LanguageGuess):
            result: Any = self.cld3.to_dict()
        else:
            result = [guess.to_dict() for guess in self.cld3]
        return {"input_len": self.input_len, "cld3": result}
