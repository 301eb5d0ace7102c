"""
Shared data model for patch-note history and change summaries.

Input side: ChangeBlock / PatchNoteEntry / PatchRelease come out of the HTML
parser, HistoryEntry is one release's view of a single entity.
Output side: AggregatedChange / GroupSummary / EntitySummary are frozen,
plain values that serialize straight to JSON.
"""

import json
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

# ========================== [Enums] ==========================


class Trend(Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


class ChangeType(Enum):
    BUFF = "buff"
    NERF = "nerf"
    ADJUSTED = "adjusted"
    NEW = "new"
    FIX = "fix"
    NONE = "none"


class PatchCategory(Enum):
    CHAMPIONS = "champions"
    ITEMS = "items"
    RUNES = "runes"
    ITEMS_RUNES = "items_runes"
    MODES = "modes"
    SKINS = "skins"
    SYSTEMS = "systems"
    BUG_FIXES = "bug_fixes"
    NEW_CONTENT = "new_content"
    UNKNOWN = "unknown"


# ========================== [Input records] ==========================


@dataclass
class ChangeBlock:
    """A titled (or untitled) list of raw change lines, e.g. one ability."""

    title: Optional[str] = None
    icon_url: Optional[str] = None
    changes: List[str] = field(default_factory=list)


@dataclass
class PatchNoteEntry:
    """Everything one patch says about one champion, item or rune."""

    id: str
    title: str
    category: PatchCategory = PatchCategory.UNKNOWN
    change_type: ChangeType = ChangeType.ADJUSTED
    summary: str = ""
    image_url: Optional[str] = None
    details: List[ChangeBlock] = field(default_factory=list)


@dataclass
class PatchRelease:
    version: str
    patch_notes: List[PatchNoteEntry] = field(default_factory=list)


@dataclass
class HistoryEntry:
    """One release's change blocks for a single entity."""

    patch_version: str
    details: List[ChangeBlock] = field(default_factory=list)
    date: Optional[str] = None


@dataclass(frozen=True)
class ChangeLine:
    text: str
    patch_version: str
    title: Optional[str] = None


# ========================== [Summary output] ==========================


def _plain(value: Any) -> Any:
    """asdict() keeps Enum members; turn them (and tuples) into JSON values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _plain(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(val) for val in value]
    return value


@dataclass(frozen=True)
class AggregatedChange:
    text: str
    trend: Trend

    @property
    def is_new(self) -> bool:
        lower = self.text.lower()
        return "new" in lower or "новое" in lower

    @property
    def is_removed(self) -> bool:
        lower = self.text.lower()
        return "removed" in lower or "удалено" in lower


@dataclass(frozen=True)
class GroupSummary:
    title: str
    icon_url: Optional[str]
    changes: Tuple[AggregatedChange, ...] = ()


@dataclass(frozen=True)
class EntitySummary:
    groups: Tuple[GroupSummary, ...] = ()

    def __len__(self) -> int:
        return len(self.groups)

    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)


@dataclass
class TierEntry:
    """Buff/nerf tally for one entity across a set of releases."""

    name: str
    category: PatchCategory
    buffs: int = 0
    nerfs: int = 0
    adjusted: int = 0
    icon_url: Optional[str] = None

    @property
    def score(self) -> int:
        return self.buffs - self.nerfs
