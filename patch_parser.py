"""
Patch note parser for League of Legends balance updates

usage: (install dependencies via `pip install -e .`)
python3 patch_parser.py [html-dir]

Goals:
- Parse saved HTML patch notes (one page per release) into structured entries:
  champion / item / rune -> ability blocks -> raw change lines
- Keep ability titles and icons so changes can later be grouped per ability
- Resolve one entity's history across releases for change_summary.aggregate
- No network access here; pages must already be on disk
"""

import re
import sys
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional

import pandas as pd
from bs4 import BeautifulSoup, NavigableString, Tag

from patch_models import (
    ChangeBlock,
    ChangeType,
    HistoryEntry,
    PatchCategory,
    PatchNoteEntry,
    PatchRelease,
)

pd.set_option('display.max_rows', None)
pd.set_option('display.max_columns', None)
pd.set_option('display.width', None)

BUG_FIX_TITLE = "Bug Fix"

# Entity kind -> categories it may be filed under
ENTITY_CATEGORIES: Dict[str, FrozenSet[PatchCategory]] = {
    "champion": frozenset({PatchCategory.CHAMPIONS}),
    "item": frozenset({PatchCategory.ITEMS, PatchCategory.ITEMS_RUNES}),
    "rune": frozenset({PatchCategory.RUNES, PatchCategory.ITEMS_RUNES}),
}


# ========================== [Parser] ==========================


class PatchNoteParser:
    """Parser for extracting per-entity change blocks from patch-note pages."""

    BUFF_KEYWORDS = [
        "увеличен",
        "усилен",
        "added",
        "increased",
        "дополнительный урон",
    ]

    NERF_KEYWORDS = [
        "уменьшен",
        "ослаблен",
        "removed",
        "decreased",
    ]

    # Heading classes that mark an ability header rather than a new entity
    DETAIL_TITLE_CLASSES = ["change-detail-title", "ability-title"]

    def __init__(self):
        # "Patch Notes 25.24" / "Патч 25.24"
        self.version_pattern = re.compile(
            r"(?:patch\s+notes|патч)\s+(\d+\.\d+)", re.IGNORECASE
        )
        # .../patch-25-24-notes/
        self.slug_pattern = re.compile(r"patch-(\d+)-(\d+)-notes", re.IGNORECASE)

        self.buff_pattern = re.compile("|".join(map(re.escape, self.BUFF_KEYWORDS)), re.IGNORECASE)
        self.nerf_pattern = re.compile("|".join(map(re.escape, self.NERF_KEYWORDS)), re.IGNORECASE)

        self.section_normalizer = re.compile(r"\s+")

    # -------------------------- [Extractors] --------------------------

    def extract_patch_version(self, text: str, fallback: str = "unknown") -> str:
        match = self.version_pattern.search(text)
        if match:
            return match.group(1)
        match = self.slug_pattern.search(text)
        if match:
            return f"{match.group(1)}.{match.group(2)}"
        return fallback

    def normalize_text(self, text: str) -> str:
        return self.section_normalizer.sub(" ", text).strip()

    def category_from_heading(self, heading_id: str) -> PatchCategory:
        """Map an h2 anchor id (e.g. 'patch-champions') to a category."""
        hid = heading_id.lower()
        if "champion" in hid:
            return PatchCategory.CHAMPIONS
        if "item" in hid and "rune" not in hid:
            return PatchCategory.ITEMS
        if "rune" in hid and "item" not in hid:
            return PatchCategory.RUNES
        if "item" in hid or "rune" in hid:
            return PatchCategory.ITEMS_RUNES
        if "skin" in hid or "chroma" in hid:
            return PatchCategory.SKINS
        if "bug" in hid:
            return PatchCategory.BUG_FIXES
        if "aram" in hid or "arena" in hid or "mode" in hid:
            return PatchCategory.MODES
        if "system" in hid or "qol" in hid:
            return PatchCategory.SYSTEMS
        if "highlight" in hid:
            return PatchCategory.NEW_CONTENT
        return PatchCategory.UNKNOWN

    def determine_change_type(self, text: str) -> ChangeType:
        if self.buff_pattern.search(text):
            return ChangeType.BUFF
        if self.nerf_pattern.search(text):
            return ChangeType.NERF
        return ChangeType.ADJUSTED

    # -------------------------- [Parsing Helpers] --------------------------

    @staticmethod
    def clean_url(url: Optional[str]) -> Optional[str]:
        """Unwrap Riot's image proxy: '...akamaihd.net/...?f=<real url>'."""
        if not url:
            return None
        if "akamaihd.net" in url and "?f=" in url:
            return url[url.find("?f=") + 3 :]
        return url

    def _image_src(self, tag: Tag) -> Optional[str]:
        img = tag.find("img")
        if img is None:
            return None
        return self.clean_url(img.get("src") or img.get("data-src"))

    def _li_text(self, li: Tag) -> str:
        """Text of an <li> without its nested lists."""
        parts = []
        for child in li.contents:
            if isinstance(child, NavigableString):
                parts.append(str(child))
            elif isinstance(child, Tag) and child.name not in {"ul", "ol"}:
                parts.append(child.get_text(" "))
        return self.normalize_text(" ".join(parts))

    def _list_changes(self, ul: Tag) -> List[str]:
        changes = []
        for li in ul.find_all("li"):
            text = self._li_text(li)
            if text:
                changes.append(text)
        return changes

    @classmethod
    def _is_detail_title(cls, classes: List[str]) -> bool:
        return any(name in classes for name in cls.DETAIL_TITLE_CLASSES)

    def _finish_entry(self, entry: PatchNoteEntry) -> PatchNoteEntry:
        all_text = " ".join(text for block in entry.details for text in block.changes)
        entry.change_type = self.determine_change_type(all_text)
        return entry

    def _parse_change_block(self, block_el: Tag, category: PatchCategory) -> List[PatchNoteEntry]:
        """Walk one .patch-change-block; it may hold several entities."""
        wrapper = block_el.find("div", recursive=False) or block_el

        notes: List[PatchNoteEntry] = []
        pending_icon: Optional[str] = None
        current: Optional[PatchNoteEntry] = None

        for child in wrapper.children:
            if not isinstance(child, Tag):
                continue
            tag = child.name
            classes = child.get("class") or []

            if tag == "a" and "reference-link" in classes:
                pending_icon = self._image_src(child)
            elif (tag in {"h3", "h4"} or "change-title" in classes) and not self._is_detail_title(classes):
                if current is not None:
                    notes.append(self._finish_entry(current))
                    current = None
                title = self.normalize_text(child.get_text(" "))
                if title:
                    current = PatchNoteEntry(
                        id=title,
                        title=title,
                        category=category,
                        image_url=pending_icon,
                    )
                    pending_icon = None
            elif tag == "blockquote":
                if current is not None:
                    current.summary = self.normalize_text(child.get_text(" "))
            elif tag == "h4" and self._is_detail_title(classes):
                if current is not None:
                    current.details.append(
                        ChangeBlock(
                            title=self.normalize_text(child.get_text(" ")),
                            icon_url=self._image_src(child),
                        )
                    )
            elif tag == "ul":
                if current is None:
                    continue
                changes = self._list_changes(child)
                if not changes:
                    continue
                if current.details:
                    current.details[-1].changes.extend(changes)
                else:
                    current.details.append(ChangeBlock(title=None, icon_url=None, changes=changes))

        if current is not None:
            notes.append(self._finish_entry(current))
        return notes

    def _parse_bug_fixes(self, section: Tag, start_index: int) -> List[PatchNoteEntry]:
        fixes = []
        for ul in section.find_all("ul"):
            for li in ul.find_all("li"):
                text = self._li_text(li)
                if not text:
                    continue
                fixes.append(
                    PatchNoteEntry(
                        id=f"fix_{start_index + len(fixes)}",
                        title=BUG_FIX_TITLE,
                        category=PatchCategory.BUG_FIXES,
                        change_type=ChangeType.FIX,
                        summary=text,
                        details=[ChangeBlock(changes=[text])],
                    )
                )
        return fixes

    # -------------------------- [Main parsing] --------------------------

    def parse_patch_html(self, patch_html: str, fallback_version: str = "unknown") -> PatchRelease:
        """Parse a single HTML patch note page into a PatchRelease."""
        soup = BeautifulSoup(patch_html, "html.parser")
        body = soup.body or soup

        full_text = body.get_text(" ", strip=True)
        version = self.extract_patch_version(full_text, fallback="")
        if not version:
            canonical = soup.find("link", rel="canonical")
            href = canonical.get("href", "") if canonical else ""
            version = self.extract_patch_version(href, fallback=fallback_version)

        release = PatchRelease(version=version)
        container = soup.find(id="patch-notes-container") or body
        category = PatchCategory.UNKNOWN

        for section in container.children:
            if not isinstance(section, Tag):
                continue
            h2 = section if section.name == "h2" else section.find("h2")
            if h2 is not None:
                category = self.category_from_heading(h2.get("id") or "")

            change_blocks = section.find_all(class_="patch-change-block")
            if "patch-change-block" in (section.get("class") or []):
                change_blocks.insert(0, section)
            for block_el in change_blocks:
                release.patch_notes.extend(self._parse_change_block(block_el, category))

            if "content-border" in (section.get("class") or []) and category is PatchCategory.BUG_FIXES:
                release.patch_notes.extend(self._parse_bug_fixes(section, len(release.patch_notes)))

        return release

    # -------------------------- [Batch helpers] --------------------------

    def parse_directory(self, directory_path: str) -> List[PatchRelease]:
        """Parse all HTML files in a directory, one release per file."""
        directory = Path(directory_path)
        if not directory.exists():
            raise FileNotFoundError(f"Directory not found: {directory_path}")

        releases: List[PatchRelease] = []
        for path in sorted(directory.glob("*.html")):
            html_text = path.read_text(encoding="utf-8")
            version_from_filename = self.extract_patch_version(path.stem, fallback=path.stem)
            releases.append(self.parse_patch_html(html_text, fallback_version=version_from_filename))
            print(f'[PARSER] parsed path {path}.')

        return releases


# ========================== [History resolution] ==========================


def entity_history(
    releases: Iterable[PatchRelease], name: str, kind: Optional[str] = None
) -> List[HistoryEntry]:
    """Collect one entity's change blocks from every release that mentions it.

    Matching is case-insensitive on entry id or title. kind ('champion',
    'item', 'rune') narrows the categories searched.
    """
    if kind is not None and kind not in ENTITY_CATEGORIES:
        raise ValueError(f"Unknown entity kind: {kind}")
    allowed = ENTITY_CATEGORIES.get(kind) if kind else None
    search = name.strip().lower()

    history: List[HistoryEntry] = []
    for release in releases:
        for note in release.patch_notes:
            if allowed is not None and note.category not in allowed:
                continue
            if note.id.lower() == search or note.title.lower() == search:
                history.append(HistoryEntry(patch_version=release.version, details=note.details))
    return history


def releases_to_dataframe(releases: Iterable[PatchRelease]) -> "pd.DataFrame":
    """Flatten releases into one row per raw change line."""
    rows = []
    for release in releases:
        for note in release.patch_notes:
            for block in note.details:
                for text in block.changes:
                    rows.append(
                        {
                            "patch_version": release.version,
                            "entity": note.title,
                            "category": note.category.value,
                            "change_type": note.change_type.value,
                            "ability": block.title,
                            "description": text,
                        }
                    )
    return pd.DataFrame(
        rows, columns=["patch_version", "entity", "category", "change_type", "ability", "description"]
    )


def main():
    """
    Example run: parse all saved HTML under public/patch-notes-html/ and print every change line.
    """
    html_dir = sys.argv[1] if len(sys.argv) > 1 else "public/patch-notes-html/"
    parser = PatchNoteParser()
    try:
        releases = parser.parse_directory(html_dir)
    except FileNotFoundError as exc:
        print(f"[ERROR] {exc}")
        return

    df = releases_to_dataframe(releases)
    if df.empty:
        print("[INFO] No change lines found.")
        return

    print("\n=== Parsed Change Lines ===")
    print(df)

    print("\n=== Change types per category ===")
    print(df.groupby(["category", "change_type"]).size().unstack(fill_value=0))


if __name__ == "__main__":
    main()
