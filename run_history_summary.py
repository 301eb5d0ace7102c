'''
net change summary for one champion / item / rune across saved patch notes

USAGE:
    python3 run_history_summary.py Ahri --kind champion
    python3 run_history_summary.py "Rabadon's Deathcap" --kind item --json
    python3 run_history_summary.py --tier-list --html-dir custom/save-path
'''

import argparse
import json
import sys
from dataclasses import asdict

import pandas as pd

from change_summary import aggregate, build_tier_list, summary_to_dataframe, tier_list_to_dataframe
from patch_parser import ENTITY_CATEGORIES, PatchNoteParser, entity_history

pd.set_option('display.max_rows', None)
pd.set_option('display.max_columns', None)
pd.set_option('display.width', None)

DEFAULT_HTML_DIR = 'public/patch-notes-html/'


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(description="Summarize balance changes across saved patch notes.")

    parser.add_argument("name", nargs='?', help="champion, item or rune name (as written in the patch notes)")
    parser.add_argument('--html-dir', dest='html_dir', type=str, default=DEFAULT_HTML_DIR,
                        help=f'directory of saved patch-note pages. Default: {DEFAULT_HTML_DIR}')
    parser.add_argument('--kind', choices=sorted(ENTITY_CATEGORIES), default=None,
                        help='restrict the lookup to one entity kind')
    parser.add_argument('--tier-list', action='store_true',
                        help='print buff/nerf counts for every entity instead of one summary')
    parser.add_argument('--json', action='store_true', help='print JSON instead of a table')
    return parser.parse_args(argv)


def run(argv=None) -> int:
    args = parse_arguments(argv)
    if not args.tier_list and not args.name:
        print('[ERROR] entity name is required unless --tier-list is given')
        return 2

    parser = PatchNoteParser()
    try:
        releases = parser.parse_directory(args.html_dir)
    except FileNotFoundError as exc:
        print(f"[ERROR] {exc}")
        return 1
    print(f'[SUMMARY] loaded {len(releases)} releases from {args.html_dir}')

    if args.tier_list:
        entries = build_tier_list(note for release in releases for note in release.patch_notes)
        if args.json:
            rows = [dict(asdict(e), category=e.category.value, score=e.score) for e in entries]
            print(json.dumps(rows, ensure_ascii=False, indent=2))
        else:
            print("\n=== Tier list (buffs - nerfs) ===")
            print(tier_list_to_dataframe(entries))
        return 0

    history = entity_history(releases, args.name, kind=args.kind)
    if not history:
        print(f"[INFO] No changes found for {args.name}.")
        return 0
    print(f'[SUMMARY] {args.name}: {len(history)} releases with changes')

    summary = aggregate(history)
    if args.json:
        print(summary.to_json(indent=2))
        return 0

    df = summary_to_dataframe(summary)
    print(f"\n=== Net changes: {args.name} ===")
    print(df[["title", "change", "trend"]])

    print("\n=== Trend counts per ability ===")
    print(df.groupby(["title", "trend"]).size().unstack(fill_value=0))
    return 0


if __name__ == "__main__":
    sys.exit(run())
