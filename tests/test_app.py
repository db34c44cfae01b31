"""Tests for the bootstrap helpers and command line in :mod:`schooladmin.app`."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import pytest

from schooladmin import app
from schooladmin.errors import ConstraintViolation
from schooladmin.services.settings import Settings
from schooladmin.utils import logging as logging_utils


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    for name in list(os.environ):
        if name.startswith("SCHOOLADMIN_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("SCHOOLADMIN_LOG_DIR", str(tmp_path / "logs"))
    root_level = logging.getLogger().level
    yield
    logging_utils.shutdown_logging()
    logging.getLogger().setLevel(root_level)


@pytest.fixture
def settings_path(tmp_path: Path) -> str:
    return str(tmp_path / "settings.json")


def _write(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


# =============================================================================
# build_context
# =============================================================================


def test_context_is_seeded_by_default() -> None:
    context = app.build_context()

    assert len(context.subjects) == 10
    assert len(context.data_manager.list_teachers()) == 5
    assert len(context.data_manager.list_books()) == 5
    assert len(context.speeches) == 2
    assert context.alerts.page_size == 10


def test_seeded_teacher_with_books_cannot_be_deleted() -> None:
    context = app.build_context()

    with pytest.raises(ConstraintViolation):
        context.data_manager.delete_teacher("4")
    assert context.data_manager.delete_teacher("2") is True


def test_context_without_demo_data() -> None:
    context = app.build_context(Settings(seed_demo_data=False, page_size=3))

    assert context.data_manager.list_books() == []
    assert context.speeches.list_speeches() == []
    assert len(context.subjects) == 10
    assert context.alerts.page_size == 3


def test_records_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError):
        app.build_context().records("alerts")


# =============================================================================
# main
# =============================================================================


def test_summary(settings_path: str, capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    assert app.main(["--settings-path", settings_path]) == app.EXIT_OK

    out = capsys.readouterr().out
    assert "Books: 5" in out
    assert "Alerts: 2 (2 active)" in out
    assert logging_utils.get_log_path() == tmp_path / "logs" / "schooladmin.log"
    assert logging_utils.get_log_path().exists()


def test_validate_command(settings_path: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    good = _write(tmp_path / "good.json", [{"name": "Ms. Rosa", "subjectId": "2"}])
    bad = _write(tmp_path / "bad.json", [{"name": "Ms. Rosa", "subjectId": "99"}])

    assert app.main(["--settings-path", settings_path, "validate", "teachers", str(good)]) == app.EXIT_OK
    assert "Valid: 1 teachers record(s)" in capsys.readouterr().out

    assert app.main(["--settings-path", settings_path, "validate", "teachers", str(bad)]) == app.EXIT_FAILURE
    assert 'unknown subject "99"' in capsys.readouterr().out


def test_validate_missing_file(settings_path: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = app.main(["--settings-path", settings_path, "validate", "books", str(tmp_path / "absent.json")])

    assert code == app.EXIT_USAGE
    assert "Cannot read" in capsys.readouterr().err


def test_import_then_export(settings_path: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exports = tmp_path / "exports"
    source = _write(
        tmp_path / "books.json",
        [{"title": "Algebra", "subjectName": "Math", "teacherName": "Mr. X", "grade": "Grade 9", "bookType": "book"}],
    )

    code = app.main(
        ["--settings-path", settings_path, "--set", f"export_dir={exports}", "import", "books", str(source), "--export"]
    )

    assert code == app.EXIT_OK
    assert "Imported 1 books" in capsys.readouterr().out
    (written,) = exports.glob("books-*.json")
    titles = [row["title"] for row in json.loads(written.read_text(encoding="utf-8"))]
    assert len(titles) == 6
    assert "Algebra" in titles


def test_import_export_to_unwritable_directory(
    settings_path: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("", encoding="utf-8")
    source = _write(tmp_path / "teachers.json", [{"name": "Ms. Rosa", "subjectId": "2"}])

    code = app.main(
        ["--settings-path", settings_path, "--set", f"export_dir={blocker}", "import", "teachers", str(source), "--export"]
    )

    assert code == app.EXIT_FAILURE
    captured = capsys.readouterr()
    assert "Imported 1 teachers" in captured.out
    assert "Cannot write export" in captured.err


def test_import_with_rejected_record(settings_path: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = _write(tmp_path / "teachers.json", [{"name": "John", "subjectId": "1"}])

    assert app.main(["--settings-path", settings_path, "import", "teachers", str(source)]) == app.EXIT_FAILURE
    out = capsys.readouterr().out
    assert "Imported 0 teachers, 1 failed" in out
    assert "Item 1: " in out


def test_export_uses_list_view(settings_path: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "out" / "books.json"

    code = app.main(
        [
            "--settings-path",
            settings_path,
            "export",
            "books",
            "--search",
            "grade 1",
            "--sort-by",
            "clickCount",
            "--order",
            "asc",
            "--out",
            str(target),
        ]
    )

    assert code == app.EXIT_OK
    assert "Exported 3 books record(s)" in capsys.readouterr().out
    rows = json.loads(target.read_text(encoding="utf-8"))
    assert [row["clickCount"] for row in rows] == [156, 189, 245]


def test_dump_settings(settings_path: str, capsys: pytest.CaptureFixture[str]) -> None:
    code = app.main(
        ["--settings-path", settings_path, "--set", "page_size=25", "--set", "teacher_honorifics=Mr.,Prof.", "--dump-settings"]
    )

    assert code == app.EXIT_OK
    payload = json.loads(capsys.readouterr().out)
    assert payload["settings"]["page_size"] == 25
    assert payload["settings"]["teacher_honorifics"] == ["Mr.", "Prof."]
    assert payload["meta"]["path"] == settings_path
    assert payload["meta"]["cli_overrides"] == ["page_size", "teacher_honorifics"]
    assert "SCHOOLADMIN_LOG_DIR" in payload["meta"]["environment_variables"]


@pytest.mark.parametrize("override", ["page_size", "colour=blue", "page_size=many", "seed_demo_data=maybe"])
def test_bad_override_is_a_usage_error(
    override: str, settings_path: str, capsys: pytest.CaptureFixture[str]
) -> None:
    assert app.main(["--settings-path", settings_path, "--set", override]) == app.EXIT_USAGE
    assert "Invalid --set override" in capsys.readouterr().err


def test_unknown_kind_exits_via_argparse(settings_path: str) -> None:
    with pytest.raises(SystemExit):
        app.main(["--settings-path", settings_path, "validate", "alerts", "x.json"])
