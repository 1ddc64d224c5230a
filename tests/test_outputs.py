import json
from pathlib import Path

import pandas as pd
import pytest

from icon_dedup.io.models import ClusterDecision, IconDecision
from icon_dedup.io.outputs import (
    compute_stats,
    exact_report_payload,
    print_summary,
    visual_report_payload,
    write_plan_table,
    write_report,
    write_stats,
)


@pytest.fixture
def decisions():
    return {
        "zoom": IconDecision("zoom", [ClusterDecision("filled", ["round"])]),
        "add": IconDecision(
            "add",
            [
                ClusterDecision("outlined", ["sharp"]),
                ClusterDecision("filled", ["round"]),
            ],
        ),
    }


def test_merged_layout_accumulates_clusters(decisions):
    payload = exact_report_payload(decisions)

    assert list(payload) == ["add", "zoom"]
    assert payload["add"] == {"keep": ["outlined", "filled"], "remove": ["sharp", "round"]}


def test_per_cluster_layout_always_uses_lists(decisions):
    payload = exact_report_payload(decisions, layout="per-cluster")

    assert payload["zoom"] == [{"keep": "filled", "remove": ["round"]}]
    assert len(payload["add"]) == 2


def test_unknown_layout_is_rejected(decisions):
    with pytest.raises(ValueError):
        exact_report_payload(decisions, layout="nested")


def test_visual_payload_uses_single_object_for_one_cluster(decisions):
    payload = visual_report_payload(decisions)

    assert payload["zoom"] == {"keep": "filled", "remove": ["round"]}
    assert isinstance(payload["add"], list)


def test_stats_total_matches_report_removals(decisions):
    stats = compute_stats(decisions, total_icons=10, styles=["outlined", "filled", "sharp", "round"])
    payload = exact_report_payload(decisions)

    assert stats.total_icons == 10
    assert stats.icons_with_duplicates == 2
    assert stats.files_to_remove == sum(len(entry["remove"]) for entry in payload.values())
    assert stats.removed_per_style == {"outlined": 0, "filled": 0, "sharp": 1, "round": 2}


def test_stats_count_styles_outside_configuration():
    decisions = {"x": IconDecision("x", [ClusterDecision("outlined", ["twotone"])])}

    stats = compute_stats(decisions, total_icons=1, styles=["outlined"])

    assert stats.removed_per_style == {"outlined": 0, "twotone": 1}


def test_write_report_is_deterministic(tmp_path: Path, decisions):
    first = write_report(tmp_path / "one.json", exact_report_payload(decisions)).read_bytes()
    reordered = dict(reversed(list(decisions.items())))
    second = write_report(tmp_path / "two.json", exact_report_payload(reordered)).read_bytes()

    assert first == second
    assert json.loads(first)["zoom"] == {"keep": ["filled"], "remove": ["round"]}


def test_write_stats(tmp_path: Path, decisions):
    stats = compute_stats(decisions, total_icons=3)

    path = write_stats(tmp_path / "metrics" / "stats.json", stats)

    assert json.loads(path.read_text(encoding="utf-8"))["files_to_remove"] == 3


def test_print_summary(capsys, decisions):
    stats = compute_stats(decisions, total_icons=4, styles=["sharp", "round"])

    print_summary(stats, Path("dedup-report.json"))

    out = capsys.readouterr().out
    assert "Icon names checked: 4" in out
    assert "Files marked for removal: 3" in out
    assert "  round: 2" in out
    assert "dedup-report.json" in out


def test_plan_table_csv(tmp_path: Path, decisions):
    groups = {"zoom": {"filled": Path("/icons/filled/zoom.svg"), "round": Path("/icons/round/zoom.svg")}}

    path = write_plan_table(tmp_path / "plan.csv", decisions, groups)

    df = pd.read_csv(path)
    assert list(df.columns) == ["icon", "style", "action", "path"]
    assert len(df) == 6
    zoom = df[df["icon"] == "zoom"]
    assert zoom[["style", "action"]].values.tolist() == [["filled", "keep"], ["round", "remove"]]
