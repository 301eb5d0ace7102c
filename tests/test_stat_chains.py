import pytest

from patch_models import ChangeLine
from stat_chains import StatChain, match_stat_line, merge_chains


# -------------------------- match_stat_line --------------------------


def test_match_colon_form() -> None:
    match = match_stat_line("Damage: 60 → 70")
    assert match is not None
    assert (match.name, match.old, match.new, match.separator) == ("Damage", "60", "70", ": ")


def test_match_colon_form_keeps_multiword_names() -> None:
    match = match_stat_line("Base AD: 60 → 62")
    assert match is not None
    assert match.name == "Base AD"
    assert match.old == "60"


def test_match_space_form_takes_minimal_name() -> None:
    match = match_stat_line("Armor 30 → 32")
    assert match is not None
    assert (match.name, match.old, match.new, match.separator) == ("Armor", "30", "32", " ")


@pytest.mark.parametrize("arrow", ["→", "⇒", "->"])
def test_match_accepts_every_arrow(arrow: str) -> None:
    match = match_stat_line(f"Range: 500 {arrow} 550")
    assert match is not None
    assert (match.old, match.new) == ("500", "550")


def test_match_permits_text_values() -> None:
    match = match_stat_line("Targeting: Single target → Area of effect")
    assert match is not None
    assert match.old == "Single target"
    assert match.new == "Area of effect"


def test_match_keeps_units_and_ratios() -> None:
    match = match_stat_line("Damage: 60/70/80 (+40% AP) → 70/80/90 (+50% AP)")
    assert match is not None
    assert match.old == "60/70/80 (+40% AP)"
    assert match.new == "70/80/90 (+50% AP)"


def test_colon_after_the_arrow_does_not_make_a_colon_name() -> None:
    match = match_stat_line("Bonus 10 → 20 (note: capped)")
    assert match is not None
    assert match.name == "Bonus"
    assert match.separator == " "
    assert match.new == "20 (note: capped)"


@pytest.mark.parametrize(
    "line",
    [
        "",
        "Passive removed",
        "Now also slows enemies",
        "→ 70",
        "60 → 70",
        "Damage: 60 →",
        "Damage: 10 → 20 → 30",
    ],
)
def test_non_stat_lines_do_not_match(line: str) -> None:
    assert match_stat_line(line) is None


# -------------------------- merge_chains --------------------------


def _lines(*pairs):
    return [ChangeLine(text=text, patch_version=version) for version, text in pairs]


def test_chain_keeps_first_start_and_last_end() -> None:
    result = merge_chains(
        _lines(
            ("25.1", "Damage: 60 → 65"),
            ("25.2", "Damage: 65 → 70"),
            ("25.3", "Damage: 70 → 80"),
        )
    )
    assert list(result.chains) == ["Damage"]
    chain = result.chains["Damage"]
    assert (chain.start, chain.end) == ("60", "80")
    assert result.lines() == ["Damage: 60 → 80"]


def test_separator_is_fixed_by_first_sighting() -> None:
    result = merge_chains(["Armor 30 → 32", "Armor: 32 → 35"])
    assert result.lines() == ["Armor 30 → 35"]


def test_arrow_is_normalized_on_output() -> None:
    assert merge_chains(["Range: 500 -> 550"]).lines() == ["Range: 500 → 550"]


def test_chains_then_unique_passthrough_in_first_seen_order() -> None:
    result = merge_chains(
        [
            "Now also slows enemies",
            "Damage: 60 → 65",
            "Passive removed",
            "Now also slows enemies",
            "Mana cost: 50 → 40",
            "Damage: 65 → 75",
        ]
    )
    assert result.passthrough == [
        "Now also slows enemies",
        "Passive removed",
        "Now also slows enemies",
    ]
    assert result.lines() == [
        "Damage: 60 → 75",
        "Mana cost: 50 → 40",
        "Now also slows enemies",
        "Passive removed",
    ]


def test_different_stats_stay_separate() -> None:
    result = merge_chains(["Damage: 60 → 65", "Base AD: 60 → 62", "Damage: 65 → 70"])
    assert result.lines() == ["Damage: 60 → 70", "Base AD: 60 → 62"]


def test_net_zero_chain_is_still_reported() -> None:
    assert merge_chains(["Damage: 10 → 15", "Damage: 15 → 10"]).lines() == ["Damage: 10 → 10"]


def test_blank_lines_are_ignored() -> None:
    result = merge_chains(["", "   ", "Damage: 1 → 2"])
    assert result.passthrough == []
    assert result.lines() == ["Damage: 1 → 2"]


def test_empty_input() -> None:
    result = merge_chains([])
    assert result.chains == {}
    assert result.lines() == []


def test_stat_chain_render() -> None:
    assert StatChain(name="Armor", start="30", end="35", separator=" ").render() == "Armor 30 → 35"
