"""
End-to-end integration tests.

These run the full pipeline against the fixture programs, through both the
file API and the command-line interface.
"""
from __future__ import annotations

import importlib.util
import json
from pathlib import Path

import pytest

from nha_assembler import ProgramTranslator
from nha_assembler.cli import default_output_path, main
from nha_assembler.models import AssemblerIOError, MalformedInstructionError
from nha_assembler.output import diff_report

FIXTURES = Path(__file__).parent / "fixtures"
ADD_NHA = FIXTURES / "add.nha"
ADD_BIN = FIXTURES / "add.bin"
CINST_NHA = FIXTURES / "cinst.nha"
CINST_TEXTBOOK_BIN = FIXTURES / "cinst_textbook.bin"
SCRIPTS = Path(__file__).parent.parent / "scripts"


def _load_script(name):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestTranslateFile:
    def test_add_fixture(self, tmp_path):
        out = tmp_path / "add.bin"
        ProgramTranslator().translate_file(str(ADD_NHA), str(out))
        assert out.read_text(encoding="utf-8") == ADD_BIN.read_text(encoding="utf-8")

    def test_crlf_fixture_with_comments(self, tmp_path):
        out = tmp_path / "cinst.bin"
        result = ProgramTranslator().translate_file(str(CINST_NHA), str(out))
        assert len(result.words) == 5
        assert out.read_bytes().count(b"\r") == 0
        assert out.read_text(encoding="utf-8").splitlines() == result.words

    def test_bare_cr_file(self, tmp_path):
        src = tmp_path / "cr.nha"
        src.write_bytes(ADD_NHA.read_bytes().replace(b"\n", b"\r"))
        out = tmp_path / "cr.bin"
        ProgramTranslator().translate_file(str(src), str(out))
        assert out.read_text(encoding="utf-8") == ADD_BIN.read_text(encoding="utf-8")

    def test_form_feed_in_comment_is_not_a_line_break(self, tmp_path):
        src = tmp_path / "ff.nha"
        src.write_bytes(b"jmp // note\x0cldr A, $1\n")
        out = tmp_path / "ff.bin"
        result = ProgramTranslator().translate_file(str(src), str(out))
        assert result.words == ["1110101010000111"]
        assert len(result.outcomes) == 1

    def test_missing_source_names_path(self, tmp_path):
        missing = tmp_path / "nope.nha"
        with pytest.raises(AssemblerIOError) as info:
            ProgramTranslator().translate_file(str(missing), str(tmp_path / "x.bin"))
        assert info.value.path == str(missing)

    def test_unwritable_output_names_path(self, tmp_path):
        out = tmp_path / "no_such_dir" / "add.bin"
        with pytest.raises(AssemblerIOError) as info:
            ProgramTranslator().translate_file(str(ADD_NHA), str(out))
        assert info.value.path == str(out)

    def test_strict_abort_keeps_earlier_words(self, tmp_path):
        src = tmp_path / "bad.nha"
        src.write_text("ldr A, $1\njmp\nadd D\nldr A, $2\n", encoding="utf-8")
        out = tmp_path / "bad.bin"
        with pytest.raises(MalformedInstructionError):
            ProgramTranslator(strict=True).translate_file(str(src), str(out))
        assert out.read_text(encoding="utf-8") == "0000000000000001\n1110101010000111\n"


class TestDiffReport:
    def test_matching_output_has_no_entries(self):
        result = ProgramTranslator().translate_text(
            ADD_NHA.read_text(encoding="utf-8")
        )
        assert diff_report.compare(diff_report.load_expected(str(ADD_BIN)), result) == []

    def test_missing_word_reported(self):
        result = ProgramTranslator().translate_text(CINST_NHA.read_text(encoding="utf-8"))
        expected = diff_report.load_expected(str(CINST_TEXTBOOK_BIN))
        entries = diff_report.compare(expected, result)
        # The filtered repeat shifts the tail by one position
        assert entries[0].position == 4
        assert entries[-1].actual is None
        assert "missing" in diff_report.render(entries)

    def test_extra_word_reported(self):
        result = ProgramTranslator().translate_text("jmp\nldr A, $1")
        entries = diff_report.compare(["1110101010000111"], result)
        assert len(entries) == 1
        assert entries[0].expected is None
        assert entries[0].instruction == "ldr A, $1"

    def test_render_format(self):
        entry = diff_report.DiffEntry(2, "ldr D, A", "1110110000010000", "0" * 16)
        assert entry.render() == (
            "line   2: ldr D, A\t1110110000010000 != 0000000000000000"
        )


class TestCli:
    def test_default_output_path(self):
        assert default_output_path("prog/add.nha") == str(Path("prog/add.bin"))

    def test_writes_bin_next_to_source(self, tmp_path):
        src = tmp_path / "add.nha"
        src.write_text(ADD_NHA.read_text(encoding="utf-8"), encoding="utf-8")
        assert main([str(src)]) == 0
        assert (tmp_path / "add.bin").read_text(encoding="utf-8") == ADD_BIN.read_text(
            encoding="utf-8"
        )

    def test_stdout_output(self, capsys):
        assert main([str(ADD_NHA), "-o", "-"]) == 0
        assert capsys.readouterr().out == ADD_BIN.read_text(encoding="utf-8")

    def test_rejects_other_suffix(self, tmp_path, capsys):
        assert main([str(tmp_path / "prog.asm")]) == 2
        assert "unrecognised" in capsys.readouterr().err

    def test_missing_source_exits_nonzero(self, tmp_path, capsys):
        missing = tmp_path / "missing.nha"
        assert main([str(missing), "-o", "-"]) == 1
        assert str(missing) in capsys.readouterr().err

    def test_strict_flag(self, tmp_path):
        src = tmp_path / "bad.nha"
        src.write_text("jgt\n", encoding="utf-8")
        assert main([str(src), "-o", "-"]) == 0
        assert main([str(src), "-o", "-", "--strict"]) == 1

    def test_expect_match(self, tmp_path):
        assert main([str(ADD_NHA), "-o", str(tmp_path / "o.bin"), "--expect", str(ADD_BIN)]) == 0

    def test_expect_mismatch(self, tmp_path, capsys):
        rc = main([
            str(CINST_NHA),
            "-o", str(tmp_path / "o.bin"),
            "--expect", str(CINST_TEXTBOOK_BIN),
        ])
        assert rc == 1
        assert "line   4" in capsys.readouterr().err

    def test_keep_duplicates_matches_textbook(self, tmp_path):
        rc = main([
            str(CINST_NHA),
            "-o", str(tmp_path / "o.bin"),
            "--keep-duplicates",
            "--expect", str(CINST_TEXTBOOK_BIN),
        ])
        assert rc == 0

    def test_report_lists_every_line(self, tmp_path):
        report = tmp_path / "report.json"
        rc = main([str(CINST_NHA), "-o", str(tmp_path / "o.bin"), "--report", str(report)])
        assert rc == 0
        data = json.loads(report.read_text(encoding="utf-8"))
        assert data["word_count"] == 5
        assert data["dropped_count"] == 1
        assert len(data["lines"]) == 8
        assert data["lines"][5]["status"] == "DUPLICATE"

    def test_strict_stdout_keeps_words_before_error(self, tmp_path, capsys):
        src = tmp_path / "bad.nha"
        src.write_text("ldr A, $1\njmp\nadd D\nldr A, $2\n", encoding="utf-8")
        assert main([str(src), "-o", "-", "--strict"]) == 1
        captured = capsys.readouterr()
        assert captured.out == "0000000000000001\n1110101010000111\n"
        assert "line 3" in captured.err

    def test_unwritable_report_exits_nonzero(self, tmp_path, capsys):
        report = tmp_path / "no_such_dir" / "report.json"
        rc = main([str(ADD_NHA), "-o", str(tmp_path / "o.bin"), "--report", str(report)])
        assert rc == 1
        assert str(report) in capsys.readouterr().err


class TestAssembleAllScript:
    def test_assembles_each_source(self, tmp_path, capsys):
        script = _load_script("assemble_all")
        translator = ProgramTranslator()
        assert script.assemble(str(ADD_NHA), tmp_path, translator)
        assert script.assemble(str(CINST_NHA), tmp_path, translator)
        assert (tmp_path / "add.bin").read_text(encoding="utf-8") == ADD_BIN.read_text(
            encoding="utf-8"
        )
        assert len((tmp_path / "cinst.bin").read_text(encoding="utf-8").splitlines()) == 5
        assert "1 dropped" in capsys.readouterr().out

    def test_missing_source_reported(self, tmp_path, capsys):
        script = _load_script("assemble_all")
        assert not script.assemble(str(tmp_path / "gone.nha"), tmp_path, ProgramTranslator())
        assert "FAILED" in capsys.readouterr().out
