"""
Tests for the font-tagger command line.
"""
from font_tagger.cli import EXIT_FAILED, EXIT_LOAD_ERROR, EXIT_OK, main


def run(data_dir, *args):
    return main(["--data-dir", str(data_dir), *args])


class TestCli:
    def test_lint_all(self, data_dir, capsys):
        assert run(data_dir, "lint") == EXIT_OK
        out = capsys.readouterr().out
        assert "Roboto\n  [WARN] Roboto should not be loud" in out
        assert "[INFO] Novelty family" in out
        assert "2 of 5 families with warnings" in out

    def test_lint_blocking_exit_code(self, data_dir):
        (data_dir / "tag_rules.csv").write_text("true,FAIL,always\n", encoding="utf-8")
        assert run(data_dir, "lint", "Lato") == EXIT_FAILED

    def test_lint_unknown_family(self, data_dir, capsys):
        assert run(data_dir, "lint", "Ghost") == EXIT_OK
        assert "Unknown family: Ghost" in capsys.readouterr().err

    def test_exemplars(self, data_dir, capsys):
        assert run(data_dir, "exemplars", "/Expressive/Loud") == EXIT_OK
        out = capsys.readouterr().out
        assert "high:\n  Roboto (90)" in out

    def test_exemplars_unknown_tag(self, data_dir):
        assert run(data_dir, "exemplars", "/No/Tag") == EXIT_FAILED

    def test_similar(self, data_dir, capsys):
        assert run(data_dir, "similar", "Roboto", "-k", "3") == EXIT_OK
        assert capsys.readouterr().out.split("\n")[:2] == ["Lato", "Roboto Flex"]

    def test_export_to_file(self, data_dir, tmp_path):
        output = tmp_path / "out.csv"
        assert run(data_dir, "export", "--output", str(output)) == EXIT_OK
        lines = output.read_text(encoding="utf-8").splitlines()
        assert lines == [
            "Lato,,/Purpose/Easy Reading,75",
            "Roboto,,/Expressive/Loud,90",
            'Roboto Flex,"wght,wdth@400,100",/Expressive/Loud,30',
        ]

    def test_validate(self, data_dir, capsys):
        assert run(data_dir, "validate") == EXIT_OK
        assert "VALIDATION PASSED" in capsys.readouterr().out

    def test_load_failure(self, tmp_path, capsys):
        assert run(tmp_path / "missing", "lint") == EXIT_LOAD_ERROR
        assert "Failed to load" in capsys.readouterr().err
