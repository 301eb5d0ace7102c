import json
from pathlib import Path

import pytest

from evaluate_trends import DEFAULT_DATA_PATH, evaluate, load_annotations, score

REPO_ROOT = Path(__file__).resolve().parents[1]


def test_bundled_annotations_are_fully_matched() -> None:
    entries = load_annotations(REPO_ROOT / DEFAULT_DATA_PATH)
    assert len(entries) > 20
    y_true, y_pred, mismatches = score(entries)
    assert len(y_true) == len(entries)
    assert mismatches == []


def test_labels_are_normalized(tmp_path: Path) -> None:
    path = tmp_path / "labels.csv"
    path.write_text(
        "text,trend,entity,patch_version\n"
        "Damage: 1 → 2,Buff,Ahri,25.1\n"
        "Damage: 2 → 1,nerf,Ahri,25.2\n"
        "Tooltip updated,adjusted,Ahri,25.3\n"
        "Something,???,Ahri,25.4\n",
        encoding="utf-8",
    )
    entries = load_annotations(path)
    assert [e["trend"] for e in entries] == ["up", "down", "neutral", None]

    y_true, y_pred, _ = score(entries)
    assert y_true == ["up", "down", "neutral"]
    assert y_pred == y_true


def test_jsonl_annotations_and_mismatch_report(tmp_path: Path, capsys) -> None:
    path = tmp_path / "labels.jsonl"
    rows = [
        {"text": "Cooldown: 10 → 8", "trend": "up"},
        {"text": "Damage: 10 → 8", "trend": "up", "meta": {"entity": "Zed"}},
    ]
    path.write_text("\n".join(json.dumps(r, ensure_ascii=False) for r in rows) + "\n\n", encoding="utf-8")

    entries = load_annotations(path)
    _, _, mismatches = score(entries)
    assert [m["text"] for m in mismatches] == ["Damage: 10 → 8"]

    evaluate(entries)
    out = capsys.readouterr().out
    assert "=== Trend Classification ===" in out
    assert "- text: Damage: 10 → 8 (entity=Zed)" in out
    assert "gold=up pred=down" in out


def test_unsupported_format(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        load_annotations(tmp_path / "labels.txt")


def test_evaluate_warns_on_nothing(capsys) -> None:
    evaluate([])
    assert "[WARN]" in capsys.readouterr().out
