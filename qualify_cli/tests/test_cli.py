"""Tests for the sqlqualify CLI (qualify_cli/app.py and commands/process.py).

Uses typer.testing.CliRunner against real files in a temporary directory;
the engine is not mocked.
"""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from qualify_cli.app import app

runner = CliRunner()

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _target_args(*extra: str) -> list[str]:
    return ["-d", "PRODDB", "-s", "SALES", *extra]


def _outputs(directory: Path) -> tuple[list[Path], list[Path]]:
    return (
        sorted(directory.glob("combined_output_*.sql")),
        sorted(directory.glob("processing_summary_*.txt")),
    )


# ---------------------------------------------------------------------------
# Execute mode
# ---------------------------------------------------------------------------


class TestExecuteMode:
    def test_writes_combined_output_and_summary(self, tmp_path: Path, sql_file: Path):
        out_dir = tmp_path / "out"
        result = runner.invoke(app, ["process", "-i", str(sql_file), *_target_args("-o", str(out_dir))])
        assert result.exit_code == 0, result.output

        [combined], [summary] = _outputs(out_dir)
        sql = combined.read_text(encoding="utf-8")
        assert sql.startswith("-- Combined SQL Output\n")
        assert "SET SCHEMA SALES;\nCREATE TABLE PRODDB.SALES.orders (" in sql
        assert "INSERT INTO PRODDB.SALES.orders SELECT * FROM FINDB.s.src;" in sql
        assert sql.rstrip().endswith("-- End of combined SQL output")

        text = summary.read_text(encoding="utf-8")
        assert "=== Processing Details ===" in text
        assert "INFO: File: " in text
        assert "Cross-database reference found: FINDB in object FINDB.s.src" in text
        assert "Processing complete." in result.output

    def test_output_dir_from_settings(self, tmp_path: Path, sql_file: Path, monkeypatch):
        monkeypatch.setenv("SQLQ_OUTPUT_DIR", str(tmp_path / "env_out"))
        result = runner.invoke(app, ["process", "-i", str(sql_file), *_target_args()])
        assert result.exit_code == 0, result.output
        combined, summary = _outputs(tmp_path / "env_out")
        assert len(combined) == 1
        assert len(summary) == 1

    def test_target_from_environment(self, tmp_path: Path, sql_file: Path, monkeypatch):
        monkeypatch.setenv("SQLQ_DBNAME", "ENVDB")
        monkeypatch.setenv("SQLQ_SCHEMANAME", "ENVSCHEMA")
        result = runner.invoke(app, ["process", "-i", str(sql_file), "-o", str(tmp_path)])
        assert result.exit_code == 0, result.output
        [combined], _ = _outputs(tmp_path)
        assert "ENVDB.ENVSCHEMA.orders" in combined.read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Preview mode
# ---------------------------------------------------------------------------


class TestPreviewMode:
    def test_no_files_written(self, tmp_path: Path, sql_file: Path):
        result = runner.invoke(
            app,
            ["process", "-i", str(sql_file), *_target_args("--preview", "-o", str(tmp_path))],
        )
        assert result.exit_code == 0, result.output
        assert _outputs(tmp_path) == ([], [])
        assert "Would add SET SCHEMA SALES;" in result.output
        assert "Would add missing semicolon" in result.output
        assert "Before:" in result.output
        assert "After:" in result.output
        assert "--no-preview" in result.output

    def test_nothing_to_change(self, tmp_path: Path):
        path = tmp_path / "clean.sql"
        path.write_text("SET SCHEMA SALES;\nDROP TABLE PRODDB.SALES.t;\n", encoding="utf-8")
        result = runner.invoke(app, ["process", "-i", str(path), *_target_args("--preview")])
        assert result.exit_code == 0, result.output
        assert "No changes would be made to the SQL files." in result.output

    def test_preview_from_environment(self, tmp_path: Path, sql_file: Path, monkeypatch):
        monkeypatch.setenv("SQLQ_PREVIEW", "true")
        result = runner.invoke(app, ["process", "-i", str(sql_file), *_target_args("-o", str(tmp_path))])
        assert result.exit_code == 0, result.output
        assert _outputs(tmp_path) == ([], [])

    def test_no_preview_overrides_environment(self, tmp_path: Path, sql_file: Path, monkeypatch):
        monkeypatch.setenv("SQLQ_PREVIEW", "true")
        result = runner.invoke(
            app,
            ["process", "-i", str(sql_file), *_target_args("--no-preview", "-o", str(tmp_path))],
        )
        assert result.exit_code == 0, result.output
        combined, _ = _outputs(tmp_path)
        assert len(combined) == 1


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------


class TestPrompting:
    def test_prompts_for_missing_names(self, tmp_path: Path, sql_file: Path):
        result = runner.invoke(
            app,
            ["process", "-i", str(sql_file), "--preview"],
            input="PRODDB\nSALES\n",
        )
        assert result.exit_code == 0, result.output
        assert "Enter DBNAME" in result.output
        assert "Enter SCHEMANAME" in result.output
        assert "PRODDB.SALES.orders" in result.output

    def test_blank_answer_reprompts(self, sql_file: Path):
        result = runner.invoke(
            app,
            ["process", "-i", str(sql_file), "-s", "SALES", "--preview"],
            input="\n   \nPRODDB\n",
        )
        assert result.exit_code == 0, result.output
        assert "DBNAME cannot be empty" in result.output

    def test_missing_input_file_reprompts(self, tmp_path: Path, sql_file: Path):
        result = runner.invoke(
            app,
            ["process", *_target_args("--preview")],
            input=f"nope.sql\n{sql_file}\n",
        )
        assert result.exit_code == 0, result.output
        assert "File 'nope.sql' not found" in result.output


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_unreadable_input_is_fatal(self, tmp_path: Path):
        result = runner.invoke(app, ["process", "-i", str(tmp_path / "missing.sql"), *_target_args()])
        assert result.exit_code == 3
        assert "Cannot read input file" in result.output

    def test_invalid_settings_are_fatal(self, sql_file: Path, monkeypatch):
        monkeypatch.setenv("SQLQ_PREVIEW", "sometimes")
        result = runner.invoke(app, ["process", "-i", str(sql_file), *_target_args()])
        assert result.exit_code == 3
        assert "Invalid configuration" in result.output

    def test_missing_listed_file_fails_run(self, tmp_path: Path, sql_file: Path):
        listing = tmp_path / "files.txt"
        listing.write_text(f"# release\n{tmp_path / 'gone.sql'}\n{sql_file}\n", encoding="utf-8")
        out_dir = tmp_path / "out"
        result = runner.invoke(app, ["process", "-i", str(listing), *_target_args("-o", str(out_dir))])
        assert result.exit_code == 1
        [combined], [summary] = _outputs(out_dir)
        assert "gone.sql" not in combined.read_text(encoding="utf-8")
        assert "ERROR: File: " in summary.read_text(encoding="utf-8")

    def test_warning_passes_without_fail_on_warn(self, tmp_path: Path):
        path = tmp_path / "q.sql"
        path.write_text("SELECT * FROM STGDV.s.t;\n", encoding="utf-8")
        result = runner.invoke(app, ["--json", "process", "-i", str(path), *_target_args("--preview")])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        [warning] = [e for e in payload["files"][0]["events"] if e["level"] == "WARNING"]
        assert warning["message"] == "NON-PROD database reference found: STGDV in object STGDV.s.t"

    def test_warning_fails_with_fail_on_warn(self, tmp_path: Path):
        path = tmp_path / "q.sql"
        path.write_text("SELECT * FROM STGDV.s.t;\n", encoding="utf-8")
        result = runner.invoke(
            app,
            ["process", "-i", str(path), *_target_args("--preview", "--fail-on-warn")],
        )
        assert result.exit_code == 1

    def test_non_prod_override(self, tmp_path: Path):
        path = tmp_path / "q.sql"
        path.write_text("SELECT * FROM STGDV.s.t JOIN SANDBOX.s.u ON 1 = 1;\n", encoding="utf-8")
        result = runner.invoke(
            app,
            [
                "--json",
                "process",
                "-i",
                str(path),
                *_target_args("--preview", "--non-prod", "SANDBOX"),
            ],
        )
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        codes = [e["code"] for e in payload["files"][0]["events"]]
        assert codes.count("NON_PROD_REFERENCE") == 1
        assert codes.count("CROSS_DATABASE_REFERENCE") == 1


# ---------------------------------------------------------------------------
# Machine-readable output
# ---------------------------------------------------------------------------


class TestJsonAndMetrics:
    def test_json_run_result(self, sql_file: Path):
        result = runner.invoke(app, ["--json", "process", "-i", str(sql_file), *_target_args("--preview")])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["input_kind"] == "SQL_FILE"
        assert payload["input_path"] == str(sql_file)
        assert payload["files"][0]["output_lines"][1] == "SET SCHEMA SALES;"

    def test_metrics_file(self, tmp_path: Path, sql_file: Path):
        metrics = tmp_path / "metrics.jsonl"
        result = runner.invoke(
            app,
            ["--metrics-file", str(metrics), "process", "-i", str(sql_file), *_target_args("--preview")],
        )
        assert result.exit_code == 0, result.output
        [line] = metrics.read_text(encoding="utf-8").splitlines()
        record = json.loads(line)
        assert record["event"] == "qualify.complete"
        assert record["data"]["statements_changed"] == 2
        assert record["data"]["preview"] is True

    def test_metrics_error_event(self, tmp_path: Path):
        metrics = tmp_path / "metrics.jsonl"
        result = runner.invoke(
            app,
            ["--metrics-file", str(metrics), "process", "-i", str(tmp_path / "missing.sql"), *_target_args()],
        )
        assert result.exit_code == 3
        record = json.loads(metrics.read_text(encoding="utf-8").splitlines()[0])
        assert record["event"] == "qualify.error"

    def test_unwritable_metrics_file_ignored(self, tmp_path: Path, sql_file: Path):
        result = runner.invoke(
            app,
            ["--metrics-file", str(tmp_path), "process", "-i", str(sql_file), *_target_args("--preview")],
        )
        assert result.exit_code == 0, result.output

    def test_verbose_shows_timings(self, sql_file: Path):
        result = runner.invoke(app, ["--verbose", "process", "-i", str(sql_file), *_target_args("--preview")])
        assert result.exit_code == 0, result.output
        assert "qualify.run" in result.output
