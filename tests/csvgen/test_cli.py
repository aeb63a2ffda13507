"""Tests for the command-line entry point."""

import json
import logging

import pytest

from csvgen.csv_io import read_output_rows
from csvgen.prompts import PromptProvider
from csvgen.settings import Settings
from generate_test_csv import build_parser, generate_test_csv, main


class ExplodingPrompts(PromptProvider):
    """Provider whose every question fails."""

    def ask(self, question):
        raise RuntimeError("terminal went away")


class TestArguments:
    """Argument parsing."""

    def test_help_prints_usage_without_generating(self, capsys, tmp_path, monkeypatch):
        """Verify --help prints usage and exits cleanly."""
        monkeypatch.chdir(tmp_path)

        with pytest.raises(SystemExit) as exc_info:
            main(['--help'])

        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        assert 'CSV Test Data Generator' in out
        assert 'source_file' in out
        assert list(tmp_path.iterdir()) == []

    def test_short_help_flag(self, capsys):
        """Verify -h behaves like --help."""
        with pytest.raises(SystemExit):
            main(['-h'])

        assert 'usage:' in capsys.readouterr().out

    def test_source_is_optional(self):
        """Verify the source path may be omitted."""
        assert build_parser().parse_args([]).source_file is None

    def test_unknown_flag_rejected(self, capsys):
        """Verify flags other than help are not accepted."""
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(['--rows', '5'])

        assert exc_info.value.code == 2


class TestMain:
    """End-to-end runs through main and generate_test_csv."""

    def test_missing_source_exits_1(self, tmp_path, monkeypatch, capsys, restore_root_logger):
        """Verify a missing source file gives exit code 1."""
        monkeypatch.setenv('CSVGEN_TEMPLATE_FILE', str(tmp_path / "config.json"))

        exit_code = main([str(tmp_path / "missing.csv")])

        assert exit_code == 1
        assert "File not found" in capsys.readouterr().err

    def test_bad_seed_exits_1(self, monkeypatch, capsys):
        """Verify invalid environment settings are reported."""
        monkeypatch.setenv('CSVGEN_SEED', 'lots')

        assert main([]) == 1
        assert 'CSVGEN_SEED' in capsys.readouterr().err

    def test_full_run_saves_template(self, tmp_path, sample_csv, scripted_prompts):
        """Verify a complete run writes output and the template document."""
        template_file = tmp_path / "templates" / "config.json"
        output = tmp_path / "generated.csv"
        prompts = scripted_prompts(
            custom_list=['none'],
            num_records=[1000],
            output_path=[str(output)],
            template_name=['people'],
        )

        exit_code = generate_test_csv(
            source_path=str(sample_csv),
            settings=Settings(template_file=str(template_file), seed=11),
            prompts=prompts,
        )

        assert exit_code == 0
        assert len(read_output_rows(output)) == 1001
        document = json.loads(template_file.read_text(encoding='utf-8'))
        assert [t['name'] for t in document['templates']] == ['people']
        assert document['templates'][0]['numRecords'] == 1000

    def test_seeded_runs_are_reproducible(self, tmp_path, sample_csv, scripted_prompts):
        """Verify the same seed produces the same file."""
        outputs = []
        for run in range(2):
            output = tmp_path / f"run{run}.csv"
            prompts = scripted_prompts(
                custom_list=['none'],
                output_path=[str(output)],
                save=[False],
            )
            generate_test_csv(
                source_path=str(sample_csv),
                settings=Settings(template_file=str(tmp_path / "config.json"), seed=5),
                prompts=prompts,
            )
            outputs.append(output.read_text(encoding='utf-8'))

        assert outputs[0] == outputs[1]

    def test_unexpected_error_logged(self, tmp_path, caplog, capsys):
        """Verify unexpected failures are logged and give exit code 1."""
        settings = Settings(template_file=str(tmp_path / "config.json"))

        with caplog.at_level(logging.ERROR):
            exit_code = generate_test_csv(settings=settings, prompts=ExplodingPrompts())

        assert exit_code == 1
        assert "Unexpected error during generation" in caplog.text
        assert "terminal went away" in capsys.readouterr().err
