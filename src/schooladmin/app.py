"""Application bootstrap helpers and the ``schooladmin`` command line."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, TextIO, get_args, get_origin, get_type_hints

from .domain.alert_manager import AlertManager
from .domain.book_store import BookStore
from .domain.data_manager import DataManager
from .domain.list_views import RECORD_KINDS, SORT_ORDERS, list_view
from .domain.speech_store import SpeechStore
from .domain.subject_catalog import SubjectCatalog
from .domain.teacher_store import TeacherStore
from .errors import AdminError
from .events import EventBus
from .seed import DemoData, demo_data, demo_subjects
from .services.exporters import export_records
from .services.importers import IMPORT_KINDS, RecordImporter, validate_import_file
from .services.settings import Settings, SettingsStore
from .utils import logging as logging_utils
from .utils.identifiers import Clock

_LOGGER = logging.getLogger(__name__)
_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_FALSE_VALUES = {"0", "false", "no", "off", "disabled"}

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


@dataclass(slots=True)
class AppContext:
    """Every collaborator of a running session, wired once."""

    settings: Settings
    subjects: SubjectCatalog
    books: BookStore
    teachers: TeacherStore
    event_bus: EventBus
    data_manager: DataManager
    speeches: SpeechStore
    alerts: AlertManager

    def records(self, kind: str) -> list[Any]:
        if kind == "books":
            return self.data_manager.list_books()
        if kind == "teachers":
            return self.data_manager.list_teachers()
        if kind == "speeches":
            return self.speeches.list_speeches()
        raise ValueError(f"Unknown record kind {kind!r}")


def build_context(settings: Settings | None = None, *, clock: Clock | None = None) -> AppContext:
    """Construct the stores, bus and managers for one session."""

    active = settings or Settings()
    data = demo_data() if active.seed_demo_data else DemoData(subjects=demo_subjects())
    honorifics = active.honorifics
    subjects = SubjectCatalog(data.subjects)
    books = BookStore(data.books, subjects=subjects, clock=clock, honorifics=honorifics)
    teachers = TeacherStore(data.teachers, subjects=subjects, clock=clock, honorifics=honorifics)
    bus = EventBus()
    context = AppContext(
        settings=active,
        subjects=subjects,
        books=books,
        teachers=teachers,
        event_bus=bus,
        data_manager=DataManager(books, teachers, event_bus=bus),
        speeches=SpeechStore(data.speeches, clock=clock),
        alerts=AlertManager(data.alerts, clock=clock, page_size=active.effective_page_size),
    )
    _LOGGER.debug(
        "Context built: %d book(s), %d teacher(s), %d speech(es), %d alert(s)",
        len(books),
        len(teachers),
        len(context.speeches),
        len(context.alerts),
    )
    return context


def configure_logging(debug: bool = False, *, force: bool = False) -> None:
    """Configure structured logging for the application."""

    level = logging.DEBUG if debug else logging.WARNING
    logging_utils.setup_logging(level, force=force)
    _LOGGER.debug("Logging configured (level=%s)", logging.getLevelName(level))


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Load persisted settings or fall back to defaults."""

    active_store = store or SettingsStore(path)
    try:
        return active_store.load(overrides=overrides)
    except OSError as exc:
        _LOGGER.warning("Failed to load settings from %s: %s", active_store.path, exc)
        return Settings()


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point invoked by the ``schooladmin`` console script."""

    parser = _build_parser()
    args = parser.parse_args(argv)

    debug = _env_flag("SCHOOLADMIN_DEBUG", default=False)
    configure_logging(debug)

    settings_path = args.settings_path or os.environ.get("SCHOOLADMIN_SETTINGS_PATH")
    resolved_path = Path(settings_path).expanduser() if settings_path else None
    settings_store = SettingsStore(resolved_path)
    try:
        cli_overrides = _coerce_cli_overrides(args.overrides or [])
    except ValueError as exc:
        print(f"Invalid --set override: {exc}", file=sys.stderr)
        return EXIT_USAGE

    settings = load_settings(resolved_path, store=settings_store, overrides=cli_overrides or None)

    if args.dump_settings:
        _dump_settings(settings, settings_store, overrides=cli_overrides)
        return EXIT_OK

    if settings.debug_logging and not debug:
        configure_logging(True, force=True)

    context = build_context(settings)
    command = getattr(args, "command", None)
    if command == "validate":
        return _cmd_validate(context, args)
    if command == "import":
        return _cmd_import(context, args)
    if command == "export":
        return _cmd_export(context, args)
    _print_summary(context)
    return EXIT_OK


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------
def _cmd_validate(context: AppContext, args: argparse.Namespace, stream: TextIO | None = None) -> int:
    out = stream or sys.stdout
    try:
        result = validate_import_file(args.file, args.kind, subjects=context.subjects)
    except OSError as exc:
        print(f"Cannot read {args.file}: {exc}", file=sys.stderr)
        return EXIT_USAGE
    if not result.is_valid:
        for message in result.errors:
            out.write(f"{message}\n")
        return EXIT_FAILURE
    out.write(f"Valid: {len(result.data or [])} {args.kind} record(s)\n")
    return EXIT_OK


def _cmd_import(context: AppContext, args: argparse.Namespace, stream: TextIO | None = None) -> int:
    out = stream or sys.stdout
    try:
        result = validate_import_file(args.file, args.kind, subjects=context.subjects)
    except OSError as exc:
        print(f"Cannot read {args.file}: {exc}", file=sys.stderr)
        return EXIT_USAGE
    if not result.is_valid:
        for message in result.errors:
            out.write(f"{message}\n")
        return EXIT_FAILURE

    try:
        report = RecordImporter(context.data_manager, context.speeches).admit(result)
    except AdminError as exc:
        out.write(f"{exc.message}\n")
        return EXIT_FAILURE

    out.write(f"{report.summary()}\n")
    for failure in report.failures:
        out.write(f"{failure.message}\n")

    if args.export:
        try:
            written = export_records(
                context.records(args.kind),
                args.kind,
                directory=context.settings.resolved_export_dir(),
            )
        except OSError as exc:
            print(f"Cannot write export: {exc}", file=sys.stderr)
            return EXIT_FAILURE
        out.write(f"Exported to {written}\n")
    return EXIT_OK if report.ok else EXIT_FAILURE


def _cmd_export(context: AppContext, args: argparse.Namespace, stream: TextIO | None = None) -> int:
    out = stream or sys.stdout
    records = list_view(
        args.kind,
        context.records(args.kind),
        search=args.search or "",
        sort_by=args.sort_by,
        order=args.order,
    )
    try:
        written = export_records(
            records,
            args.kind,
            path=args.out,
            directory=context.settings.resolved_export_dir(),
        )
    except OSError as exc:
        print(f"Cannot write export: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    out.write(f"Exported {len(records)} {args.kind} record(s) to {written}\n")
    return EXIT_OK


def _print_summary(context: AppContext, stream: TextIO | None = None) -> None:
    out = stream or sys.stdout
    stats = context.alerts.stats()
    out.write(
        f"Subjects: {len(context.subjects)}\n"
        f"Teachers: {len(context.teachers)}\n"
        f"Books: {len(context.books)}\n"
        f"Speeches: {len(context.speeches)}\n"
        f"Alerts: {stats.total} ({stats.by_status.get('active', 0)} active)\n"
    )


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------
def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schooladmin",
        description="Inspect, validate, import and export school admin records.",
    )
    parser.add_argument(
        "--dump-settings",
        action="store_true",
        help="Print the effective settings payload and exit.",
    )
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.schooladmin/settings.json path.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        metavar="KEY=VALUE",
        action="append",
        default=[],
        help="Override persisted settings for this run (repeatable).",
    )
    commands = parser.add_subparsers(dest="command")

    validate = commands.add_parser("validate", help="Validate a JSON import file.")
    validate.add_argument("kind", choices=IMPORT_KINDS)
    validate.add_argument("file", type=Path)

    importer = commands.add_parser("import", help="Validate and admit a JSON import file.")
    importer.add_argument("kind", choices=IMPORT_KINDS)
    importer.add_argument("file", type=Path)
    importer.add_argument(
        "--export",
        action="store_true",
        help="Export the resulting collection to the export directory.",
    )

    exporter = commands.add_parser("export", help="Export a collection as JSON.")
    exporter.add_argument("kind", choices=RECORD_KINDS)
    exporter.add_argument("--search", default="", help="Only export records matching this term.")
    exporter.add_argument("--sort-by", dest="sort_by", default=None, help="List view sort key.")
    exporter.add_argument("--order", choices=SORT_ORDERS, default="desc")
    exporter.add_argument("--out", type=Path, default=None, help="Write to this file instead.")
    return parser


def _env_flag(name: str, *, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _coerce_cli_overrides(items: Sequence[str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if not items:
        return overrides

    fields = Settings.__dataclass_fields__  # type: ignore[attr-defined]
    type_hints = get_type_hints(Settings)
    for entry in items:
        if "=" not in entry:
            raise ValueError(f"Override '{entry}' must use KEY=VALUE syntax.")
        key, raw_value = entry.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError("Override is missing a field name.")
        if key not in fields:
            raise ValueError(f"Unknown setting '{key}'.")
        annotation = type_hints.get(key, fields[key].type)
        overrides[key] = _coerce_value(annotation, raw_value.strip())
    return overrides


def _coerce_value(annotation: Any, raw_value: str) -> Any:
    target = _resolve_annotation(annotation)
    normalized = raw_value.strip()

    if normalized.lower() in {"none", "null"} and target is not str:
        return None
    if target is str or target is Any:
        return normalized
    if target is bool:
        return _parse_bool(normalized)
    if target is int:
        return int(normalized, 10)
    if target is list:
        if normalized.startswith("["):
            try:
                return json.loads(normalized)
            except json.JSONDecodeError as exc:
                raise ValueError("List overrides must be valid JSON arrays") from exc
        return [token.strip() for token in normalized.split(",") if token.strip()]
    if target is dict:
        try:
            return json.loads(normalized or "{}")
        except json.JSONDecodeError as exc:
            raise ValueError("Dict overrides must be valid JSON objects") from exc
    return normalized


def _resolve_annotation(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is None:
        return annotation
    if origin in {list, dict}:
        return origin
    args = [arg for arg in get_args(annotation) if arg is not type(None)]
    if not args:
        return origin
    return _resolve_annotation(args[0])


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Cannot coerce '{value}' to a boolean.")


def _dump_settings(
    settings: Settings,
    store: SettingsStore,
    *,
    overrides: Mapping[str, Any],
    stream: TextIO | None = None,
) -> None:
    destination = stream or sys.stdout
    metadata = {
        "path": str(store.path),
        "cli_overrides": sorted(overrides.keys()),
        "environment_variables": _active_env_overrides(),
    }
    output = {"settings": asdict(settings), "meta": metadata}
    json.dump(output, destination, indent=2)
    destination.write("\n")


def _active_env_overrides() -> list[str]:
    return sorted(name for name in os.environ if name.startswith("SCHOOLADMIN_"))


__all__ = ["AppContext", "build_context", "configure_logging", "load_settings", "main"]
