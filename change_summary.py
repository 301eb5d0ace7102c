"""
Per-entity change summaries across patch releases.

usage:
    summary = aggregate(history)          # history: List[HistoryEntry]
    df = summary_to_dataframe(summary)

Goals:
- Walk an entity's history oldest -> newest and group lines by sub-component
  (ability title, or DEFAULT_GROUP_TITLE for untitled blocks)
- Collapse repeated "Stat: A → B" edits into one net line (see stat_chains)
- Tag each resulting line up/down/neutral (see change_trend)
- Tally buffs/nerfs per entity for a tier-list style overview
"""

import re
from functools import cmp_to_key
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from change_trend import DEFAULT_CLASSIFIER, TrendClassifier
from patch_models import (
    AggregatedChange,
    ChangeLine,
    EntitySummary,
    GroupSummary,
    HistoryEntry,
    PatchCategory,
    PatchNoteEntry,
    TierEntry,
    Trend,
)
from stat_chains import merge_chains

DEFAULT_GROUP_TITLE = "Base Stats"

SUMMARY_COLUMNS = ["title", "icon_url", "change", "trend", "is_new", "is_removed"]
TIER_COLUMNS = ["name", "category", "buffs", "nerfs", "adjusted", "score", "icon_url"]

_LEADING_INT = re.compile(r"^\s*[-+]?\d+")

# -------------------------- [Version ordering] --------------------------


def version_segments(version: Optional[str]) -> List[int]:
    """'25.S1.3' -> [25, 3]. Segments without a leading integer are skipped."""
    if not version:
        return []
    segments = []
    for raw in str(version).split("."):
        match = _LEADING_INT.match(raw)
        if match:
            segments.append(int(match.group(0)))
    return segments


def compare_versions(v1: Optional[str], v2: Optional[str]) -> int:
    """Numeric, segment-wise compare; missing segments count as 0."""
    p1 = version_segments(v1)
    p2 = version_segments(v2)
    for i in range(max(len(p1), len(p2))):
        n1 = p1[i] if i < len(p1) else 0
        n2 = p2[i] if i < len(p2) else 0
        if n1 != n2:
            return -1 if n1 < n2 else 1
    return 0


def sort_history(history: Iterable[HistoryEntry]) -> List[HistoryEntry]:
    """Oldest release first. Stable for equal versions."""
    return sorted(history, key=cmp_to_key(lambda a, b: compare_versions(a.patch_version, b.patch_version)))


# -------------------------- [Aggregation] --------------------------


def _collect_groups(
    history: Sequence[HistoryEntry], default_title: str
) -> Dict[str, Tuple[Optional[str], List[ChangeLine]]]:
    groups: Dict[str, Tuple[Optional[str], List[ChangeLine]]] = {}
    for entry in history:
        for block in entry.details or []:
            key = block.title or default_title
            icon, lines = groups.get(key, (None, []))
            if icon is None and block.icon_url:
                icon = block.icon_url
            for text in block.changes or []:
                if text and text.strip():
                    lines.append(ChangeLine(text=text, patch_version=entry.patch_version, title=block.title))
            groups[key] = (icon, lines)
    return groups


def aggregate(
    history: Iterable[HistoryEntry],
    default_title: str = DEFAULT_GROUP_TITLE,
    classifier: Optional[TrendClassifier] = None,
) -> EntitySummary:
    """Build the net-change summary for one entity.

    history may come in any order; it is sorted by release first. Groups keep
    the order in which they first appear, oldest release first.
    """
    classifier = classifier or DEFAULT_CLASSIFIER
    groups = _collect_groups(sort_history(history), default_title)

    summaries = []
    for title, (icon, lines) in groups.items():
        merged = merge_chains(lines).lines()
        changes = tuple(
            AggregatedChange(text=text, trend=classifier.classify(text)) for text in merged if text.strip()
        )
        if changes:
            summaries.append(GroupSummary(title=title, icon_url=icon, changes=changes))
    return EntitySummary(groups=tuple(summaries))


# -------------------------- [Tier list] --------------------------


def build_tier_list(
    patch_notes: Iterable[PatchNoteEntry], classifier: Optional[TrendClassifier] = None
) -> List[TierEntry]:
    """Count buffed / nerfed / adjusted lines per (title, category).

    Every raw line counts, chains are not collapsed here. Icons track the most
    recent non-empty image_url.
    """
    classifier = classifier or DEFAULT_CLASSIFIER
    tally: Dict[Tuple[str, PatchCategory], TierEntry] = {}

    for note in patch_notes:
        key = (note.title, note.category)
        entry = tally.get(key)
        if entry is None:
            entry = TierEntry(name=note.title, category=note.category)
            tally[key] = entry
        if note.image_url:
            entry.icon_url = note.image_url

        for block in note.details:
            for text in block.changes:
                trend = classifier.classify(text)
                if trend is Trend.UP:
                    entry.buffs += 1
                elif trend is Trend.DOWN:
                    entry.nerfs += 1
                else:
                    entry.adjusted += 1

    return sorted(tally.values(), key=lambda e: (-e.score, -e.buffs, e.nerfs))


# -------------------------- [DataFrame helpers] --------------------------


def summary_to_dataframe(summary: EntitySummary) -> "pd.DataFrame":
    """One row per summarized change."""
    rows = []
    for group in summary.groups:
        for change in group.changes:
            rows.append(
                {
                    "title": group.title,
                    "icon_url": group.icon_url,
                    "change": change.text,
                    "trend": change.trend.value,
                    "is_new": change.is_new,
                    "is_removed": change.is_removed,
                }
            )
    if not rows:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def tier_list_to_dataframe(entries: Iterable[TierEntry]) -> "pd.DataFrame":
    rows = [
        {
            "name": entry.name,
            "category": entry.category.value,
            "buffs": entry.buffs,
            "nerfs": entry.nerfs,
            "adjusted": entry.adjusted,
            "score": entry.score,
            "icon_url": entry.icon_url,
        }
        for entry in entries
    ]
    if not rows:
        return pd.DataFrame(columns=TIER_COLUMNS)
    return pd.DataFrame(rows, columns=TIER_COLUMNS)
