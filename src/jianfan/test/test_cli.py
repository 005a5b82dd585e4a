import json

import pytest

from typer.testing import CliRunner

from jianfan.__main__ import app
from jianfan.session import toggle_label

runner = CliRunner()

SIMP_TEXT = "测试书\n" + "这是一个测试\n" * 30
TRAD_TEXT = "測試書\n" + "這是一個測試\n" * 30


def test_detect_raw_json(tmp_path, fake_engine):
    f = tmp_path / "simp.txt"
    f.write_text(SIMP_TEXT, encoding="utf-8")
    result = runner.invoke(app, ["detect", str(f), "--raw"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert len(data) == 1
    assert data[0]["script"] == "simplified"
    assert data[0]["method"] == "statistical"


def test_detect_directory_and_output(tmp_path, fake_engine):
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "a.txt").write_text(TRAD_TEXT, encoding="utf-8")
    (docs / "b.md").write_text(SIMP_TEXT, encoding="utf-8")
    (docs / "c.png").write_bytes(b"\x89PNG")
    (docs / "d.txt").write_text("", encoding="utf-8")
    out = tmp_path / "result.json"
    result = runner.invoke(app, ["detect", str(docs), "-o", str(out)])
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text(encoding="utf-8"))
    assert [d["script"] for d in data] == ["traditional", "simplified", "traditional"]
    assert data[2]["method"] == "default"


def test_convert_to_traditional(tmp_path, fake_engine):
    f = tmp_path / "simp.txt"
    f.write_text(SIMP_TEXT, encoding="utf-8")
    result = runner.invoke(app, ["convert", str(f), "--to", "traditional"])
    assert result.exit_code == 0, result.output
    assert result.stdout.startswith("測試書\n\n這是一個測試")
    assert "这" not in result.stdout


def test_convert_auto_writes_file_named_by_title(tmp_path, fake_engine):
    f = tmp_path / "trad.txt"
    f.write_text(TRAD_TEXT, encoding="utf-8")
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    result = runner.invoke(app, ["convert", str(f), "--to", "auto", "-o", str(out_dir)])
    assert result.exit_code == 0, result.output
    text = (out_dir / "测试书.txt").read_text(encoding="utf-8")
    assert text.startswith("测试书\n\n这是一个测试")


def test_convert_rejects_unknown_target(tmp_path, fake_engine):
    f = tmp_path / "simp.txt"
    f.write_text(SIMP_TEXT, encoding="utf-8")
    result = runner.invoke(app, ["convert", str(f), "--to", "klingon"])
    assert result.exit_code == 2


def test_toggle_labels_follow_state(tmp_path, fake_engine):
    f = tmp_path / "simp.txt"
    f.write_text(SIMP_TEXT, encoding="utf-8")
    result = runner.invoke(app, ["toggle", str(f), "--times", "3", "--raw"])
    assert result.exit_code == 0, result.output
    steps = json.loads(result.stdout)
    assert [s["state"] for s in steps] == ["simplified", "traditional", "simplified", "traditional"]
    for step in steps:
        assert step["label"] == toggle_label(step["state"] == "traditional")
    assert steps[1]["title"] == "測試書"
    assert steps[2]["title"] == "测试书"


def test_detect_skips_explicit_non_text_files(tmp_path, fake_engine):
    image = tmp_path / "cover.png"
    image.write_bytes(b"\x89PNG")
    result = runner.invoke(app, ["detect", str(image), "--raw"])
    assert result.exit_code == 1

    f = tmp_path / "simp.txt"
    f.write_text(SIMP_TEXT, encoding="utf-8")
    result = runner.invoke(app, ["detect", str(f), str(image), "--raw"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert [d["path"] for d in data] == [str(f.resolve())]


def test_convert_copy_puts_result_on_clipboard(tmp_path, fake_engine, monkeypatch):
    pyperclip = pytest.importorskip("pyperclip")
    copied = []
    monkeypatch.setattr(pyperclip, "copy", copied.append)

    f = tmp_path / "simp.txt"
    f.write_text(SIMP_TEXT, encoding="utf-8")
    result = runner.invoke(app, ["convert", str(f), "--to", "traditional", "--copy"])
    assert result.exit_code == 0, result.output
    assert len(copied) == 1
    assert copied[0].startswith("測試書\n\n這是一個測試")
    assert "这" not in copied[0]
