"""Tests for the command-line entry point."""

import json
from pathlib import Path

import pytest

import lineage_graph.__main__ as cli

DATASET = Path(__file__).parent.parent / "examples" / "stoics.json"


def test_json_output_lists_positions(tmp_path):
    out = tmp_path / "out" / "positions.json"
    assert cli.main([str(DATASET), "--format", "json", "--width", "1000", "-o", str(out)]) == 0

    rows = json.loads(out.read_text(encoding="utf-8"))
    assert [r["id"] for r in rows][:3] == ["socrates", "antisthenes", "plato"]
    assert rows[0] == {"id": "socrates", "generation": 0, "x": rows[0]["x"], "y": 100}
    assert {r["y"] for r in rows if r["generation"] == 5} == {1000}


def test_svg_to_stdout(capsys):
    assert cli.main([str(DATASET)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("<svg")
    assert out.rstrip().endswith("</svg>")


def test_select_marks_clickable_edges(capsys):
    assert cli.main([str(DATASET), "--select", "zeno"]) == 0
    svg = capsys.readouterr().out
    assert 'data-source="zeno" data-target="cleanthes" class="clickable"' in svg
    assert 'data-source="diogenes" data-target="crates" opacity="0.6"' in svg


def test_search_selects_by_label(capsys):
    assert cli.main([str(DATASET), "--search", "chrysipp"]) == 0
    svg = capsys.readouterr().out
    assert 'data-source="cleanthes" data-target="chrysippus" class="clickable"' in svg


def test_unknown_selection_still_renders(capsys, caplog):
    assert cli.main([str(DATASET), "--select", "epictetus"]) == 0
    assert "epictetus" in caplog.text
    assert "class=\"clickable\"" not in capsys.readouterr().out


def test_invalid_dataset_exits_2(tmp_path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text('{"nodes": [{"id": "a"}]}', encoding="utf-8")
    assert cli.main([str(bad)]) == 2
    assert capsys.readouterr().err.startswith("error:")


def test_missing_file_exits_2(tmp_path, capsys):
    assert cli.main([str(tmp_path / "missing.json")]) == 2
    assert "error:" in capsys.readouterr().err


def test_fetch_images_uses_source(monkeypatch, capsys):
    class _Source:
        async def thumbnails(self, nodes):
            return {n.id: f"https://img.test/{n.id}.jpg" for n in nodes if n.wiki}

        async def detail_image(self, node):
            return None

    monkeypatch.setattr(cli, "WikipediaImageSource", _Source)
    assert cli.main([str(DATASET), "--fetch-images"]) == 0
    svg = capsys.readouterr().out
    assert '<image href="https://img.test/zeno.jpg"' in svg
    assert "https://img.test/aristo.jpg" not in svg


def test_no_enforce_gap_flag_matches_when_pairs_resolve(tmp_path):
    out_default = tmp_path / "a.json"
    out_bare = tmp_path / "b.json"
    assert cli.main([str(DATASET), "--format", "json", "-o", str(out_default)]) == 0
    assert cli.main([str(DATASET), "--format", "json", "--no-enforce-gap", "-o", str(out_bare)]) == 0
    # At most two nodes per generation: the fixed passes already separate every pair.
    default_rows = json.loads(out_default.read_text())
    bare_rows = json.loads(out_bare.read_text())
    assert [r["id"] for r in default_rows] == [r["id"] for r in bare_rows]
    assert [r["x"] for r in default_rows] == pytest.approx([r["x"] for r in bare_rows])


def test_select_and_search_are_exclusive(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([str(DATASET), "--select", "zeno", "--search", "plato"])
    assert exc.value.code == 2
    assert "not allowed with argument" in capsys.readouterr().err
