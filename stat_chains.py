"""
Collapse per-release "Stat: old → new" lines into one net change.

A stat tuned in five consecutive patches ("Damage: 60 → 65", then
"Damage: 65 → 70", ...) ends up as a single "Damage: 60 → 80" line: the
oldest known start and the newest known end. Lines that do not look like a
stat transition are kept verbatim, deduplicated.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Union

from patch_models import ChangeLine

ARROW = "→"

_ARROWS = r"(?:→|⇒|->)"

# "Base AD: 60 → 62"
COLON_STAT_PATTERN = re.compile(
    rf"^(?P<name>[^:]+?)\s*:\s*(?P<old>.*?)\s*{_ARROWS}\s*(?P<new>.*)$",
    re.DOTALL,
)
# "Damage 60 → 70"
SPACE_STAT_PATTERN = re.compile(
    rf"^(?P<name>.+?)\s+(?P<old>.*?)\s*{_ARROWS}\s*(?P<new>.*)$",
    re.DOTALL,
)
ARROW_PATTERN = re.compile(_ARROWS)


@dataclass(frozen=True)
class StatLineMatch:
    name: str
    old: str
    new: str
    separator: str


@dataclass
class StatChain:
    """start and separator are fixed at first sighting; end tracks the newest."""

    name: str
    start: str
    end: str
    separator: str = ": "

    def render(self) -> str:
        return f"{self.name}{self.separator}{self.start} {ARROW} {self.end}"


@dataclass
class ChainMergeResult:
    chains: Dict[str, StatChain] = field(default_factory=dict)
    passthrough: List[str] = field(default_factory=list)

    def lines(self) -> List[str]:
        """Chains in first-sighting order, then unique passthrough lines."""
        rendered = [chain.render() for chain in self.chains.values()]
        seen = set()
        for text in self.passthrough:
            if text in seen:
                continue
            seen.add(text)
            rendered.append(text)
        return rendered


def match_stat_line(text: str) -> Optional[StatLineMatch]:
    """Parse "<name><sep><old> → <new>"; None for anything else."""
    if not text or not ARROW_PATTERN.search(text):
        return None
    text = text.strip()

    for pattern, separator in ((COLON_STAT_PATTERN, ": "), (SPACE_STAT_PATTERN, " ")):
        match = pattern.match(text)
        if not match:
            continue
        name = match.group("name").strip()
        old = match.group("old").strip()
        new = match.group("new").strip()
        if ARROW_PATTERN.search(name):
            continue
        if not name or not old or not new:
            continue
        if ARROW_PATTERN.search(new):
            # "A: 1 → 2 → 3" is too ambiguous to chain
            return None
        return StatLineMatch(name=name, old=old, new=new, separator=separator)
    return None


def merge_chains(lines: Iterable[Union[ChangeLine, str]]) -> ChainMergeResult:
    """Fold oldest-first lines into stat chains plus passthrough text.

    Callers must pass lines in chronological order; the first sighting of a
    stat fixes its start value.
    """
    result = ChainMergeResult()
    for line in lines:
        text = line.text if isinstance(line, ChangeLine) else line
        if not text or not text.strip():
            continue

        match = match_stat_line(text)
        if match is None:
            result.passthrough.append(text)
            continue

        chain = result.chains.get(match.name)
        if chain is None:
            result.chains[match.name] = StatChain(
                name=match.name, start=match.old, end=match.new, separator=match.separator
            )
        else:
            chain.end = match.new
    return result
