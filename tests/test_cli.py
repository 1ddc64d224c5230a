import json
from pathlib import Path

from PIL import Image

from icon_dedup import cli
from icon_dedup.cli import main
from icon_dedup.scan.grouper import group_icons_by_name

SVG = '<svg xmlns="http://www.w3.org/2000/svg"><circle cx="12" cy="12" r="8"/></svg>'


def test_exact_run_is_idempotent(tmp_path: Path, icon_dir, write_icon, capsys):
    for style in ("outlined", "filled", "sharp", "round"):
        write_icon(style, "a", SVG)
    write_icon("outlined", "b", SVG)
    write_icon("filled", "b", SVG.replace("r=\"8\"", "r=\"6\""))
    report = tmp_path / "dedup-report.json"
    metrics = tmp_path / "metrics.json"

    args = ["exact", "--icons", str(icon_dir), "--report", str(report), "--metrics", str(metrics)]
    assert main(args) == 0
    first = report.read_bytes()
    assert main(args) == 0

    assert report.read_bytes() == first
    assert json.loads(first) == {"a": {"keep": ["outlined"], "remove": ["filled", "sharp", "round"]}}
    stats = json.loads(metrics.read_text(encoding="utf-8"))
    assert stats["total_icons"] == 2
    assert stats["files_to_remove"] == 3
    assert "Files marked for removal: 3" in capsys.readouterr().out


def test_exact_then_apply_deletes_duplicates(tmp_path: Path, icon_dir, write_icon):
    write_icon("filled", "c", SVG)
    write_icon("round", "c", SVG)
    write_icon("sharp", "c", SVG.replace("cx", "cy"))
    report = tmp_path / "report.json"

    assert main(["exact", "--icons", str(icon_dir), "--report", str(report), "--layout", "per-cluster"]) == 0
    assert json.loads(report.read_text(encoding="utf-8")) == {"c": [{"keep": "filled", "remove": ["round"]}]}

    assert main(["apply", "--report", str(report), "--icons", str(icon_dir)]) == 0
    assert (icon_dir / "filled" / "c.svg").exists()
    assert (icon_dir / "sharp" / "c.svg").exists()
    assert not (icon_dir / "round" / "c.svg").exists()


def test_apply_with_missing_report_changes_nothing(tmp_path: Path, icon_dir, write_icon):
    target = write_icon("round", "d", SVG)

    assert main(["apply", "--report", str(tmp_path / "missing.json"), "--icons", str(icon_dir)]) == 1
    assert target.exists()


def test_unreadable_source_aborts_without_report(tmp_path: Path, icon_dir, write_icon):
    write_icon("filled", "e", b"\x00not an image", ext=".png")
    write_icon("outlined", "e", b"\x00not an image", ext=".png")
    report = tmp_path / "visual.json"

    code = main(
        ["visual", "--icons", str(icon_dir), "--ext", "png", "--report", str(report)]
    )

    assert code == 1
    assert not report.exists()


def _png(path: Path, color) -> bytes:
    with Image.new("RGBA", (32, 32), color) as img:
        img.save(path, format="PNG")
    return path.read_bytes()


def test_visual_run_on_raster_sources(tmp_path: Path, icon_dir, write_icon):
    black = _png(tmp_path / "black.png", (0, 0, 0, 255))
    white = _png(tmp_path / "white.png", (255, 255, 255, 255))
    write_icon("outlined", "f", black, ext=".png")
    write_icon("filled", "f", black, ext=".png")
    write_icon("round", "f", white, ext=".png")
    report = tmp_path / "visual.json"
    scratch = tmp_path / "scratch"
    plan = tmp_path / "plan.csv"

    code = main(
        [
            "visual",
            "--icons",
            str(icon_dir),
            "--ext",
            ".png",
            "--report",
            str(report),
            "--scratch-dir",
            str(scratch),
            "--plan-table",
            str(plan),
        ]
    )

    assert code == 0
    assert json.loads(report.read_text(encoding="utf-8")) == {"f": {"keep": "outlined", "remove": ["filled"]}}
    assert (scratch / "round" / "f.png").exists()
    assert plan.exists()


def test_mark_writes_plan(tmp_path: Path):
    report = tmp_path / "report.json"
    report.write_text(json.dumps({"home": {"keep": "outlined", "remove": ["round"]}}), encoding="utf-8")
    components = tmp_path / "components.json"
    components.write_text(
        json.dumps([{"name": "Home", "variants": ["Style=Outlined", "Style=Round", "Style=Two Tone"]}]),
        encoding="utf-8",
    )
    out = tmp_path / "marks.json"

    assert main(["mark", "--report", str(report), "--components", str(components), "--out", str(out)]) == 0

    marks = json.loads(out.read_text(encoding="utf-8"))
    assert [m["style"] for m in marks] == ["round", "twotone"]


def test_exact_aborts_when_variant_vanishes_before_hashing(tmp_path: Path, icon_dir, write_icon, monkeypatch):
    write_icon("outlined", "g", SVG)
    vanished = write_icon("filled", "g", SVG)
    report = tmp_path / "dedup-report.json"

    def scan_then_remove(*args, **kwargs):
        groups = group_icons_by_name(*args, **kwargs)
        vanished.unlink()
        return groups

    monkeypatch.setattr(cli, "group_icons_by_name", scan_then_remove)

    assert main(["exact", "--icons", str(icon_dir), "--report", str(report)]) == 1
    assert not report.exists()


def test_unwritable_report_path_exits_nonzero(tmp_path: Path, icon_dir, write_icon):
    write_icon("outlined", "h", SVG)
    write_icon("filled", "h", SVG)
    report_dir = tmp_path / "taken"
    report_dir.mkdir()

    assert main(["exact", "--icons", str(icon_dir), "--report", str(report_dir)]) == 1
    assert report_dir.is_dir()
