"""
Session, document and config tests for lc2k_lint.
"""
import sys
import os
import json
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from lc2k_lint import (ConfigError, Diagnostic, DiagnosticCollection, Document, LintConfig,
                       LintSession, find_config, load_config)
from lc2k_lint.diagnostics import make_diagnostic


class RecordingSink:
    """Sink that keeps every call, to check set-replaces and delete semantics."""
    def __init__(self):
        self.calls = []

    def set(self, uri, diagnostics):
        self.calls.append(("set", uri, list(diagnostics)))

    def delete(self, uri):
        self.calls.append(("delete", uri))


class TestSession:
    def test_open_change_close(self):
        session = LintSession()
        doc = Document("file:///p.as", ["foo"])
        assert session.open(doc)
        assert len(session.sink.get(doc.uri)) == 1

        fixed = doc.with_lines(["halt"])
        assert session.change(fixed)
        assert session.sink.get(doc.uri) == []

        session.close(fixed)
        assert doc.uri not in session.sink
        assert session.sink.get(doc.uri) is None

    def test_other_language_ignored(self):
        sink = RecordingSink()
        session = LintSession(sink=sink)
        assert not session.open(Document("notes.txt", ["foo"], language_id="plaintext"))
        assert sink.calls == []

    def test_one_set_per_event(self):
        sink = RecordingSink()
        session = LintSession(sink=sink)
        doc = Document("a.as", ["add 8 0 0"])
        session.open(doc)
        session.change(doc)
        session.close(doc)
        assert [c[0] for c in sink.calls] == ["set", "set", "delete"]
        assert sink.calls[0][2] == sink.calls[1][2]

    def test_documents_are_independent(self):
        session = LintSession()
        a = Document("a.as", ["foo"])
        b = Document("b.as", ["halt"])
        assert session.open_all([a, b, Document("c.md", ["x"], "markdown")]) == 2
        session.close(a)
        assert "a.as" not in session.sink
        assert session.sink.get("b.as") == []

    def test_format_uses_session_config(self):
        session = LintSession(LintConfig(tab_stops=[4, 10], comment_token=";"))
        doc = Document("a.as", ["x noop ; hi", "y   halt"])
        assert session.format(doc) == [(0, "x   noop ; hi")]

    def test_comment_token_reaches_checker(self):
        session = LintSession(LintConfig(comment_token=";"))
        doc = Document("a.as", ["halt ; # not a comment here"])
        session.open(doc)
        assert session.sink.get("a.as") == []


class TestDocument:
    def test_from_text(self):
        doc = Document.from_text("x", "a\r\nb\n\nc\n")
        assert doc.lines == ("a", "b", "", "c")
        assert doc.line_count == 4

    def test_from_text_empty(self):
        assert Document.from_text("x", "").lines == ("",)

    def test_from_path(self, tmp_path):
        path = tmp_path / "prog.as"
        path.write_text("halt\n", encoding="utf-8")
        doc = Document.from_path(path)
        assert doc.uri == str(path)
        assert doc.lines == ("halt",)
        assert doc.language_id == "lc2k"

    def test_from_path_other_suffix(self, tmp_path):
        path = tmp_path / "readme.txt"
        path.write_text("hi", encoding="utf-8")
        assert Document.from_path(path).language_id == "plaintext"


class TestDiagnostics:
    def test_format(self):
        d = Diagnostic(line=2, start=4, end=5, message="Registers must be 0-7")
        assert d.format("p.as") == "p.as:3:5: warning: Registers must be 0-7"
        assert str(d) == "3:5: warning: Registers must be 0-7"

    def test_to_dict(self):
        d = make_diagnostic("add 8 0 0", 0, 4, 5, "Registers must be 0-7")
        assert d.to_dict() == {
            "line": 0, "start": 4, "end": 5, "message": "Registers must be 0-7",
            "severity": "warning", "source": "lc2k",
        }

    def test_out_of_range_fails_loud(self):
        if not __debug__:
            pytest.skip("assertions disabled")
        with pytest.raises(AssertionError):
            make_diagnostic("halt", 0, 2, 9, "bad range")

    def test_collection_set_replaces(self):
        coll = DiagnosticCollection()
        d = Diagnostic(0, 0, 1, "x")
        coll.set("a", [d, d])
        coll.set("a", [d])
        assert coll.get("a") == [d]
        assert list(coll) == ["a"]
        assert len(coll) == 1
        coll.clear()
        assert len(coll) == 0


class TestConfig:
    def test_defaults(self):
        cfg = LintConfig()
        assert cfg.tab_stops == (8, 16, 24, 40)
        assert cfg.comment_token == "#"

    def test_from_dict_editor_section(self):
        cfg = LintConfig.from_dict({"lc2k": {"tabStops": [4, 8], "commentToken": ";"}})
        assert cfg.tab_stops == (4, 8)
        assert cfg.comment_token == ";"

    def test_from_dict_snake_case(self):
        cfg = LintConfig.from_dict({"tab_stops": [10]})
        assert cfg.tab_stops == (10,)
        assert cfg.comment_token == "#"

    @pytest.mark.parametrize("data", [
        {"tabStops": []},
        {"tabStops": [8, 0]},
        {"tabStops": [8, -1]},
        {"tabStops": "8,16"},
        {"tabStops": [8, True]},
        {"tabStops": [8.5]},
        {"commentToken": ""},
        {"commentToken": 5},
        {"indent": 4},
        {"lc2k": [1, 2]},
        {"lc2k": {"tabStops": [8]}, "indent": 4},
        {"lc2k": {"tabStops": [8]}, "commentToken": ";"},
        [8, 16],
    ])
    def test_invalid(self, data):
        with pytest.raises(ConfigError):
            LintConfig.from_dict(data)

    def test_merged(self):
        cfg = LintConfig().merged(tab_stops=[2, 4])
        assert cfg.tab_stops == (2, 4)
        assert cfg.comment_token == "#"
        assert LintConfig().merged() == LintConfig()

    def test_load_config(self, tmp_path):
        path = tmp_path / "lc2k.json"
        path.write_text(json.dumps({"lc2k": {"commentToken": "!"}}), encoding="utf-8")
        assert load_config(path).comment_token == "!"

    def test_load_config_errors(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.json")
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError) as exc:
            load_config(bad)
        assert exc.value.path == bad

    def test_find_config_walks_up(self, tmp_path):
        (tmp_path / "lc2k.json").write_text("{}", encoding="utf-8")
        nested = tmp_path / "src" / "deep"
        nested.mkdir(parents=True)
        assert find_config(nested) == (tmp_path / "lc2k.json").resolve()
