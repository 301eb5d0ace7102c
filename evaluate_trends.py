import argparse
import csv
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sklearn.metrics import classification_report

from change_trend import TrendClassifier

DEFAULT_DATA_PATH = Path("data/trend_annotations.csv")

# Annotators wrote buff/nerf as often as up/down.
LABEL_ALIASES = {
    "up": "up",
    "buff": "up",
    "down": "down",
    "nerf": "down",
    "neutral": "neutral",
    "adjusted": "neutral",
}


def _canonical_label(value: Any) -> Optional[str]:
    """Map raw annotation labels onto up/down/neutral; None if unusable."""
    if value is None:
        return None
    text = str(value).strip().lower()
    return LABEL_ALIASES.get(text)


def load_jsonl_annotations(path: Path) -> List[Dict[str, Any]]:
    """Read annotated lines from a JSON Lines file ({"text": ..., "trend": ...})."""
    annotations: List[Dict[str, Any]] = []
    with path.open("r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            row = json.loads(line)
            annotations.append(
                {
                    "text": (row.get("text") or "").strip(),
                    "trend": _canonical_label(row.get("trend")),
                    "meta": row.get("meta") or {},
                }
            )
    return annotations


def load_csv_annotations(path: Path) -> List[Dict[str, Any]]:
    """Load annotations from the manual CSV (text, trend, entity, patch_version)."""
    entries: List[Dict[str, Any]] = []
    with path.open("r", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        for row in reader:
            entries.append(
                {
                    "text": (row.get("text") or "").strip(),
                    "trend": _canonical_label(row.get("trend")),
                    "meta": {
                        "entity": row.get("entity"),
                        "patch_version": row.get("patch_version"),
                    },
                }
            )
    return entries


def load_annotations(path: Path) -> List[Dict[str, Any]]:
    """Load annotations from JSONL or CSV."""
    if path.suffix == ".jsonl":
        return load_jsonl_annotations(path)
    if path.suffix == ".csv":
        return load_csv_annotations(path)
    raise ValueError(f"Unsupported annotation format for {path}")


def score(
    entries: Iterable[Dict[str, Any]], classifier: Optional[TrendClassifier] = None
) -> Tuple[List[str], List[str], List[Dict[str, Any]]]:
    """Run the classifier over annotated lines; returns gold, predicted and mismatches."""
    classifier = classifier or TrendClassifier()
    y_true: List[str] = []
    y_pred: List[str] = []
    mismatches: List[Dict[str, Any]] = []

    for entry in entries:
        gold = entry.get("trend")
        text = entry.get("text") or ""
        if gold is None or not text:
            continue
        pred = classifier.classify(text).value
        y_true.append(gold)
        y_pred.append(pred)
        if gold != pred:
            mismatches.append({"text": text, "gold": gold, "pred": pred, "meta": entry.get("meta", {})})
    return y_true, y_pred, mismatches


def evaluate(entries: Iterable[Dict[str, Any]]) -> None:
    y_true, y_pred, mismatches = score(entries)

    if not y_true:
        print("[WARN] No entries evaluated (no labeled lines found).")
        return

    labels = sorted(set(y_true + y_pred))
    print("=== Trend Classification ===")
    print(classification_report(y_true, y_pred, labels=labels, target_names=labels, zero_division=0))

    if mismatches:
        print("\n=== Misclassified Examples ===")
        for mismatch in mismatches:
            meta = mismatch.get("meta") or {}
            meta_bits = [f"{k}={v}" for k, v in meta.items() if v not in (None, "", "None")]
            meta_str = f" ({', '.join(meta_bits)})" if meta_bits else ""
            print(f"- text: {mismatch['text']}{meta_str}")
            print(f"  trend: gold={mismatch['gold']} pred={mismatch['pred']}")


def main():
    parser = argparse.ArgumentParser(description="Evaluate the up/down/neutral trend heuristics against manual annotations.")
    parser.add_argument(
        "--data",
        type=Path,
        default=DEFAULT_DATA_PATH,
        help="Path to annotations (.csv with text,trend columns or .jsonl).",
    )
    args = parser.parse_args()

    if not args.data.exists():
        raise FileNotFoundError(f"Annotated data not found at {args.data}")

    evaluate(load_annotations(args.data))


if __name__ == "__main__":
    main()
