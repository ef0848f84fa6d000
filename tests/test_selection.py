from pathlib import Path
from types import SimpleNamespace

import pytest

import mountainsnail.util.fzf as fz
from mountainsnail.errors import FzfNotFoundError, SelectionError
from mountainsnail.errors import ConfigurationError
from mountainsnail.terrain import validate_adjustment
from mountainsnail.util.paths import list_gpx_candidates
from mountainsnail.util.prompt import prompt_bool, prompt_choice, prompt_value


def test_list_gpx_candidates_one_level_deep(tmp_path: Path):
    (tmp_path / "a.gpx").write_text("<gpx/>", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")
    sub = tmp_path / "alps"
    sub.mkdir()
    (sub / "b.GPX").write_text("<gpx/>", encoding="utf-8")
    deep = sub / "deeper"
    deep.mkdir()
    (deep / "c.gpx").write_text("<gpx/>", encoding="utf-8")

    assert list_gpx_candidates(tmp_path) == sorted([tmp_path / "a.gpx", sub / "b.GPX"])


def test_list_gpx_candidates_missing_root(tmp_path: Path):
    assert list_gpx_candidates(tmp_path / "nope") == []


def test_fzf_missing(monkeypatch):
    monkeypatch.setattr(fz, "which", lambda _cmd: None)
    with pytest.raises(FzfNotFoundError):
        fz.fzf_select_paths([Path("a.gpx")], header="Choose file")


def test_fzf_selection_parsed(monkeypatch, tmp_path: Path):
    target = tmp_path / "a.gpx"
    calls = []

    def fake_run(cmd, input, stdout, stderr):
        calls.append((cmd, input))
        return SimpleNamespace(returncode=0, stdout=f"a.gpx\t{target}\n".encode(), stderr=b"")

    monkeypatch.setattr(fz, "which", lambda _cmd: "/usr/bin/fzf")
    monkeypatch.setattr(fz.subprocess, "run", fake_run)

    assert fz.fzf_select_paths([target], header="Choose file") == [target.resolve()]
    cmd, sent = calls[0]
    assert "--no-multi" in cmd
    assert "--preview" not in cmd
    assert sent == f"a.gpx\t{target}\n".encode()


def test_fzf_abort_returns_nothing(monkeypatch):
    monkeypatch.setattr(fz, "which", lambda _cmd: "/usr/bin/fzf")
    monkeypatch.setattr(
        fz.subprocess, "run",
        lambda *a, **k: SimpleNamespace(returncode=130, stdout=b"", stderr=b""),
    )
    assert fz.fzf_select_paths([Path("a.gpx")], header="h") == []


def test_fzf_failure(monkeypatch):
    monkeypatch.setattr(fz, "which", lambda _cmd: "/usr/bin/fzf")
    monkeypatch.setattr(
        fz.subprocess, "run",
        lambda *a, **k: SimpleNamespace(returncode=2, stdout=b"", stderr=b"boom"),
    )
    with pytest.raises(SelectionError, match="boom"):
        fz.fzf_select_paths([Path("a.gpx")], header="h")


def _answers(monkeypatch, *values):
    it = iter(values)
    monkeypatch.setattr("builtins.input", lambda _prompt: next(it))


def test_prompt_bool(monkeypatch):
    _answers(monkeypatch, "maybe", "Y")
    assert prompt_bool("Add time?", default=False) is True
    _answers(monkeypatch, "")
    assert prompt_bool("Add time?", default=False) is False


def test_prompt_choice(monkeypatch):
    _answers(monkeypatch, "")
    assert prompt_choice("Terrain", ["road", "path"], default=1) == 1
    _answers(monkeypatch, "9", "x", "1")
    assert prompt_choice("Terrain", ["road", "path"]) == 0
    _answers(monkeypatch, "PATH")
    assert prompt_choice("Terrain", ["road", "path"]) == 1


def test_prompt_value_retries(monkeypatch, capsys):
    _answers(monkeypatch, "-1", "fast", "")
    assert prompt_value("Adjustment", default="0.16", convert=validate_adjustment) == 0.16
    assert "Adjustment must be" in capsys.readouterr().out
