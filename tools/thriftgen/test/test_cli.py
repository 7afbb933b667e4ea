"""Tests for the thriftgen command line."""

import pytest

from tools.thriftgen.__main__ import main


@pytest.fixture
def idl_file(tmp_path, tutorial_idl):
    path = tmp_path / "tutorial.thrift"
    path.write_text(tutorial_idl)
    return path


class TestMain:
    def test_writes_output(self, tmp_path, idl_file, capsys):
        out = tmp_path / "gen" / "tutorial.rs"
        assert main([str(idl_file), "--out", str(out)]) == 0
        assert "pub enum Operation {" in out.read_text()
        printed = capsys.readouterr().out
        assert f"wrote {out}" in printed
        assert "Generated 8 definitions" in printed

    def test_lang_flag(self, tmp_path, idl_file):
        out = tmp_path / "tutorial.rs"
        assert main([str(idl_file), "--out", str(out), "--lang", "cpp"]) == 0
        assert "// Module: tutorial" in out.read_text()

    def test_missing_namespace(self, tmp_path, idl_file, capsys):
        out = tmp_path / "tutorial.rs"
        assert main([str(idl_file), "--out", str(out), "--lang", "go"]) == 1
        assert "Error: No namespace declared for language 'go'" in capsys.readouterr().err
        assert not out.exists()

    def test_parse_error_writes_nothing(self, tmp_path, capsys):
        src = tmp_path / "bad.thrift"
        src.write_text("namespace rust bad\nstruct S { 1: i32 x }\n")
        out = tmp_path / "bad.rs"
        assert main([str(src), "--out", str(out)]) == 1
        assert "Error: Line 2:15: expected 'optional' or 'required'" in capsys.readouterr().err
        assert not out.exists()

    def test_missing_input(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.thrift"), "--out", str(tmp_path / "x.rs")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_config_file(self, tmp_path, capsys):
        src = tmp_path / "t.thrift"
        src.write_text("namespace rust t\nstruct S {}\ntrailing\n")
        config = tmp_path / "thriftgen.yaml"
        config.write_text("strict: true\n")
        out = tmp_path / "t.rs"
        assert main([str(src), "--out", str(out), "--config", str(config)]) == 1
        assert "a top-level definition" in capsys.readouterr().err

    def test_config_templates_override(self, tmp_path):
        tmpl = tmp_path / "tmpl"
        tmpl.mkdir()
        (tmpl / "enum.rs.j2").write_text("// enum {{ enum.ident }}\n")
        config = tmp_path / "thriftgen.yaml"
        config.write_text("lang: null\ntemplates: tmpl\n")
        src = tmp_path / "e.thrift"
        src.write_text("enum Color { RED }")
        out = tmp_path / "e.rs"
        assert main([str(src), "--out", str(out), "--config", str(config)]) == 0
        assert "// enum Color" in out.read_text()

    def test_input_not_utf8(self, tmp_path, capsys):
        src = tmp_path / "binary.thrift"
        src.write_bytes(b"\xff\xfe namespace rust x\n")
        out = tmp_path / "x.rs"
        assert main([str(src), "--out", str(out)]) == 1
        assert "Error:" in capsys.readouterr().err
        assert not out.exists()
