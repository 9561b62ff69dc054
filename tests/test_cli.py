"""Tests for target resolution and the command line."""

import json
import sys
import pytest

from cli import main, walk_lines
from graph.model import Ref
from scanner.errors import TargetError
from scanner.resolver import as_root, resolve_target


SETTINGS = '''
from dataclasses import dataclass, field
from typing import Any

from graph.model import Ref


@dataclass
class Server:
    Host: str = "localhost"
    Port: int = 8080


@dataclass
class Config:
    Debug: bool = False
    server: Server = field(default_factory=Server)


COUNTER = Ref.new(1)


@dataclass
class Shared:
    A: Any = COUNTER
    B: Any = COUNTER


def make_config():
    return Config(Debug=True)


def broken():
    raise RuntimeError("boom")


CONFIG_REF = Ref.new(Config(Debug=True))
NUMBER = 5
'''


@pytest.fixture
def settings(tmp_path, monkeypatch):
    (tmp_path / "paramtree_settings.py").write_text(SETTINGS, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, "paramtree_settings", raising=False)
    yield "paramtree_settings"
    sys.modules.pop("paramtree_settings", None)


class TestResolver:
    """Tests for resolving scan targets."""

    def test_resolve(self, settings):
        """Test importing a module attribute."""
        assert resolve_target(f"{settings}:NUMBER") == 5

    def test_dotted_attribute(self, settings):
        """Test resolving nested attributes."""
        assert resolve_target(f"{settings}:Server.Port") == 8080

    def test_malformed(self):
        """Test that targets need a module and an attribute."""
        for target in ("nocolon", ":attr", "module:"):
            with pytest.raises(TargetError):
                resolve_target(target)

    def test_missing_module(self):
        """Test that unknown modules raise."""
        with pytest.raises(TargetError):
            resolve_target("paramtree_no_such_module:Config")

    def test_missing_attribute(self, settings):
        """Test that unknown attributes raise."""
        with pytest.raises(TargetError):
            resolve_target(f"{settings}:Nope")

    def test_as_root(self, settings):
        """Test turning targets into scan roots."""
        ref = Ref.new(1)

        assert as_root(ref) is ref
        assert as_root(resolve_target(f"{settings}:Config")).get().Debug is False
        assert as_root(resolve_target(f"{settings}:make_config")).get().Debug is True
        assert as_root(5).get() == 5

    def test_as_root_failure(self, settings):
        """Test that failing factories raise."""
        with pytest.raises(TargetError):
            as_root(resolve_target(f"{settings}:broken"))


class TestScanCommand:
    """Tests for paramtree scan."""

    def test_ascii(self, settings, capsys):
        """Test the default ASCII output."""
        assert main(["scan", f"{settings}:Config"]) == 0

        out = capsys.readouterr().out
        assert out.splitlines()[0] == "Config"
        assert "└── Debug = false" in out
        assert "Port = 8080" in out

    def test_factory_and_ref(self, settings, capsys):
        """Test scanning factories and refs."""
        assert main(["scan", f"{settings}:make_config"]) == 0
        assert "Debug = true" in capsys.readouterr().out

        assert main(["scan", f"{settings}:CONFIG_REF", "--ascii-style", "ascii"]) == 0
        assert "\\-- Debug = true" in capsys.readouterr().out

    def test_json(self, settings, capsys):
        """Test JSON output."""
        assert main(["scan", f"{settings}:Config", "-f", "json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["modules"][0]["name"] == "server"

    def test_mermaid(self, settings, capsys):
        """Test Mermaid output."""
        assert main(["scan", f"{settings}:Config", "-f", "mermaid", "--orientation", "TD"]) == 0

        assert capsys.readouterr().out.startswith("flowchart TD")

    def test_output_file(self, settings, tmp_path, capsys):
        """Test writing output to a file."""
        target = tmp_path / "tree.txt"

        assert main(["scan", f"{settings}:Config", "-o", str(target)]) == 0

        assert "Debug = false" in target.read_text(encoding="utf-8")
        assert "Output written to" in capsys.readouterr().err

    def test_warnings(self, settings, capsys):
        """Test that warnings are reported on stderr."""
        assert main(["scan", f"{settings}:Shared"]) == 0

        captured = capsys.readouterr()
        assert "Warning: found duplicates (A, B) and skipped B" in captured.err
        assert "A = 1" in captured.out

    def test_strict(self, settings, capsys):
        """Test that strict mode fails on warnings."""
        assert main(["scan", f"{settings}:Shared", "--strict"]) == 2
        assert main(["scan", f"{settings}:Config", "--strict"]) == 0

    def test_not_a_record(self, settings, capsys):
        """Test scanning something that is not a record."""
        assert main(["scan", f"{settings}:NUMBER"]) == 1

        assert capsys.readouterr().err.startswith("Error: ")

    def test_bad_target(self, capsys):
        """Test scanning an unresolvable target."""
        assert main(["scan", "paramtree_no_such_module:Config"]) == 1

        assert "Error: " in capsys.readouterr().err


class TestWalkCommand:
    """Tests for paramtree walk."""

    def test_walk_lines(self):
        """Test listing nodes with their types."""
        assert walk_lines({"a": 1, "b": [True]}) == [
            "/\tdict",
            "/a\tint",
            "/b\tlist",
            "/b/0\tbool",
        ]

    def test_walk_file(self, tmp_path, capsys):
        """Test walking a single document."""
        path = tmp_path / "app.json"
        path.write_text('{"name": "app", "tags": ["x"]}', encoding="utf-8")

        assert main(["walk", str(path)]) == 0

        assert capsys.readouterr().out.splitlines() == [
            "/\tdict",
            "/name\tstr",
            "/tags\tlist",
            "/tags/0\tstr",
        ]

    def test_walk_directory(self, tmp_path, capsys):
        """Test walking every document of a directory."""
        (tmp_path / "a.yaml").write_text("x: 1\n", encoding="utf-8")
        (tmp_path / "b.json").write_text("[]", encoding="utf-8")
        (tmp_path / "c.txt").write_text("ignored", encoding="utf-8")

        assert main(["walk", str(tmp_path)]) == 0

        out = capsys.readouterr().out
        assert f"==> {tmp_path / 'a.yaml'} <==" in out
        assert f"==> {tmp_path / 'b.json'} <==" in out
        assert "/x\tint" in out
        assert "c.txt" not in out

    def test_include_ext(self, tmp_path, capsys):
        """Test restricting directory searches by extension."""
        (tmp_path / "a.yaml").write_text("x: 1\n", encoding="utf-8")
        (tmp_path / "b.json").write_text("[]", encoding="utf-8")

        assert main(["walk", str(tmp_path), "--include-ext", "json"]) == 0

        out = capsys.readouterr().out
        assert out.splitlines() == ["/\tlist"]

    def test_map_keys_are_escaped(self):
        """Test that slashes in keys are escaped in paths."""
        assert walk_lines({"a/b": 1})[1] == "/a\\/b\tint"

    def test_malformed_document(self, tmp_path, capsys):
        """Test that unparsable documents fail."""
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")

        assert main(["walk", str(path)]) == 1
        assert capsys.readouterr().err.startswith("Error: ")
