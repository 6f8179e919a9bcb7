"""
Tests for the ginevra Command
=============================

These tests run the click command through CliRunner and check stdout,
stderr and the exit status for normal runs, input validation and fatal
errors.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from ginevra.cli.errors import ExitCode
from ginevra.cli.ginevra import check_extension, main, parse_defines
from ginevra.errors import InputFileError

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def runner():
    return CliRunner()


def run_on(runner, filename: str, content: str, *args):
    """Write content to filename in an isolated directory and run ginevra on it."""
    with runner.isolated_filesystem():
        Path(filename).write_text(content, encoding="utf-8")
        return runner.invoke(main, [*args, filename])


# =============================================================================
# Helper Function Tests
# =============================================================================

class TestHelpers:
    """Extension checking and -D parsing."""

    @pytest.mark.parametrize("path", ["a.h", "dir/b.cpp", "x.tar.h"])
    def test_valid_extensions(self, path):
        check_extension(path)

    @pytest.mark.parametrize("path", ["a.c", "a.hpp", "a.H", "a.CPP", "h", "cpp"])
    def test_invalid_extensions(self, path):
        with pytest.raises(InputFileError):
            check_extension(path)

    def test_parse_defines(self):
        assert parse_defines(("A=1", "B", "C = two words")) == {
            "A": "1",
            "B": "1",
            "C": "two words",
        }

    def test_parse_defines_empty_value(self):
        assert parse_defines(("E=",)) == {"E": ""}


# =============================================================================
# Argument and Input Validation Tests
# =============================================================================

class TestValidation:
    """Usage errors and unusable input files exit with status 1."""

    def test_no_arguments(self, runner):
        result = runner.invoke(main, [])
        assert result.exit_code == ExitCode.FAILURE
        assert "usage: ginevra" in result.stdout

    def test_too_many_arguments(self, runner):
        result = runner.invoke(main, ["a.h", "b.h"])
        assert result.exit_code == 1
        assert "usage: ginevra" in result.stdout

    def test_wrong_extension(self, runner):
        result = run_on(runner, "notes.txt", "x\n")
        assert result.exit_code == 1
        assert "Invalid file extension" in result.stderr
        assert result.stdout == ""

    def test_extension_is_case_sensitive(self, runner):
        result = run_on(runner, "UPPER.H", "x\n")
        assert result.exit_code == 1
        assert "Invalid file extension" in result.stderr

    def test_missing_file(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["missing.h"])
        assert result.exit_code == 1
        assert "missing.h" in result.stderr

    def test_bad_define_option(self, runner):
        result = run_on(runner, "a.h", "x\n", "-D", "=3")
        assert result.exit_code == 1
        assert "invalid macro definition" in result.stderr

    def test_unknown_option(self, runner):
        result = run_on(runner, "a.h", "x\n", "--bogus")
        assert result.exit_code == ExitCode.FAILURE
        assert "usage: ginevra" in result.stdout
        assert "--bogus" in result.stderr

    def test_define_option_without_value(self, runner):
        result = runner.invoke(main, ["a.h", "-D"])
        assert result.exit_code == 1
        assert "usage: ginevra" in result.stdout
        assert "-D" in result.stderr

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "ginevra" in result.stdout


# =============================================================================
# Processing Tests
# =============================================================================

class TestProcessing:
    """Successful runs and fatal scanning errors."""

    def test_golden_file(self, runner):
        expected = (DATA_DIR / "fruit.h.expected").read_text(encoding="utf-8")
        result = runner.invoke(main, [str(DATA_DIR / "fruit.h")])
        assert result.exit_code == 0, result.stderr
        assert result.stdout == expected
        assert "unsupported directive '#include'" in result.stderr

    def test_apple(self, runner):
        result = run_on(runner, "apple.cpp", "#define APPLE 8\nAPPLE + APPLE\n")
        assert result.exit_code == 0
        assert "8 + 8" in result.stdout
        assert result.stderr == ""

    def test_redefinition_warning(self, runner):
        result = run_on(runner, "x.h", "#define X 1\n#define X 2\nX\n")
        assert result.exit_code == 0
        assert result.stdout == "2 \n"
        assert "warning: symbol 'X' redefined" in result.stderr

    def test_recoverable_error_continues(self, runner):
        result = run_on(runner, "bad.h", "a = 'oops\nb\n")
        assert result.exit_code == 0
        assert result.stdout == "a =\nb \n"
        assert "bad.h:1:5: error: malformed string literal" in result.stderr

    def test_empty_file(self, runner):
        """An empty input produces empty output and succeeds."""
        result = run_on(runner, "empty.h", "")
        assert result.exit_code == 0
        assert result.stdout == ""
        assert result.stderr == ""

    def test_unterminated_quote(self, runner):
        result = run_on(runner, "q.h", "x = 'abc")
        assert result.exit_code == 1
        assert "q.h:1:5: error: unterminated string literal" in result.stderr
        assert result.stdout == "x ="

    def test_unterminated_comment(self, runner):
        result = run_on(runner, "c.cpp", "x /* open\n")
        assert result.exit_code == 1
        assert "unterminated comment" in result.stderr

    def test_premature_end_in_define(self, runner):
        result = run_on(runner, "d.h", "#define")
        assert result.exit_code == 1
        assert "premature end of file" in result.stderr

    def test_predefine_option(self, runner):
        result = run_on(runner, "p.h", "APPLE\n", "-D", "APPLE=8")
        assert result.exit_code == 0
        assert result.stdout == "8 \n"

    def test_column_one_option(self, runner):
        result = run_on(runner, "c1.h", "  #define X 1\nX\n", "--column-one")
        assert result.exit_code == 0
        assert result.stdout == "#define X 1\nX \n"
        assert "not in column 1" in result.stderr

    def test_expand_definitions_option(self, runner):
        source = "#define A 1\n#define B A\nB\n"
        assert run_on(runner, "e.h", source).stdout == "A \n"
        result = run_on(runner, "e.h", source, "--expand-definitions")
        assert result.stdout == "1 \n"

    def test_verbose_summary(self, runner):
        result = run_on(runner, "v.h", "#define X 1\nX\n", "-v")
        assert result.exit_code == 0
        assert result.stdout == "1 \n"
        assert "v.h: 0 errors, 0 warnings" in result.stderr
