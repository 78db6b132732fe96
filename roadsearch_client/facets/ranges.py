"""RoadSearch Range Boundaries - Optionally Bounded Numeric Intervals.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

Number = Union[int, float]

@dataclass(frozen=True)
class RangeBoundary:
    """A numeric interval whose bounds may each be absent.

    A missing lower bound leaves the range open below, a missing upper
    bound leaves it open above. ``lower < upper`` is not checked; the
    server decides what an inverted range means.
    """
    lower: Optional[Number] = None
    upper: Optional[Number] = None

    @classmethod
    def less_than(cls, upper: Number) -> "RangeBoundary":
        return cls(upper=upper)

    @classmethod
    def greater_than(cls, lower: Number) -> "RangeBoundary":
        return cls(lower=lower)

    @classmethod
    def between(cls, lower: Number, upper: Number) -> "RangeBoundary":
        return cls(lower=lower, upper=upper)

    @property
    def is_open_below(self) -> bool:
        return self.lower is None

    @property
    def is_open_above(self) -> bool:
        return self.upper is None

    def to_dict(self) -> Dict[str, Any]:
        # Absent bounds are omitted, never sent as null.
        result: Dict[str, Any] = {}
        if self.lower is not None:
            result["from"] = self.lower
        if self.upper is not None:
            result["to"] = self.upper
        return result

__all__ = ["RangeBoundary", "Number"]
