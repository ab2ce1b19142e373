from __future__ import annotations

import logging
import sys
import time
from pathlib import Path

import typer

from rostercheck import __version__
from rostercheck.common.run_id import generate_run_id
from rostercheck.common.time import getDurationMs
from rostercheck.config import Settings, loadSettings
from rostercheck.domain.exceptions import RosterFormatError
from rostercheck.domain.validation.validator import ValidationOptions
from rostercheck.infra.artifacts.report_writer import createEmptyReport, finalizeReport, writeReportJson
from rostercheck.infra.console import printRosterTable
from rostercheck.infra.sources.roster_file import read_roster_text
from rostercheck.loggingSetup import (
    StdStreamToLogger,
    TeeStream,
    closeCommandLogger,
    createCommandLogger,
    logEvent,
)
from rostercheck.usecases.validate_usecase import ValidateUseCase

app = typer.Typer(no_args_is_help=True, add_completion=False)


def ensureDir(path: str) -> None:
    """
    Назначение:
        Создаёт каталог, если он отсутствует.
    """
    Path(path).mkdir(parents=True, exist_ok=True)


def requireCsv(csvPath: str | None) -> None:
    """
    Назначение:
        Базовая проверка наличия файла ростера.

    Поведение:
        - Если csvPath не задан или файл не существует - завершает процесс с exit code 2.
    """
    if not csvPath:
        typer.echo("ERROR: --csv is required", err=True)
        raise typer.Exit(code=2)

    p = Path(csvPath)
    if not p.exists() or not p.is_file():
        typer.echo(f"ERROR: CSV file not found: {csvPath}", err=True)
        raise typer.Exit(code=2)


def printRunHeader(runId: str, command: str, settings: Settings, sources: list[str]) -> None:
    """
    Назначение:
        Печатает сводку параметров запуска.
    """
    typer.echo(
        f"run_id={runId} command={command} log_level={settings.log_level} "
        f"report_duplicates={settings.report_duplicate_emails} "
        f"report_invalid_roles={settings.report_invalid_roles} sources={sources}"
    )


def runWithReport(
    ctx: typer.Context,
    commandName: str,
    csvPath: str | None,
    runner,
) -> None:
    """
    Назначение:
        Унифицированная обвязка выполнения команд:
        - создаёт логгер + файл лога
        - создаёт report.json skeleton
        - проверяет наличие входного файла
        - перенаправляет stdout/stderr в лог (tee)
        - гарантирует запись отчёта в finally

    Поведение:
        - Код выхода берётся из runner (0/1) либо 2 при ошибках входа.
    """
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]
    sources = ctx.obj["sources"]

    startMonotonic = time.monotonic()

    try:
        logger, logFilePath = createCommandLogger(
            commandName=commandName,
            logDir=settings.log_dir,
            runId=runId,
            logLevel=settings.log_level,
        )
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=2)

    report = createEmptyReport(runId=runId, command=commandName, configSources=sources)
    report.set_meta(source_path=csvPath, items_limit=settings.report_items_limit, app_version=__version__)

    originalStdout = sys.stdout
    originalStderr = sys.stderr

    stdoutLoggerStream = StdStreamToLogger(logger, logging.INFO, runId, "stdout")
    stderrLoggerStream = StdStreamToLogger(logger, logging.ERROR, runId, "stderr")

    sys.stdout = TeeStream(originalStdout, stdoutLoggerStream)
    sys.stderr = TeeStream(originalStderr, stderrLoggerStream)

    exitCode: int | None = None

    try:
        logEvent(logger, logging.INFO, runId, "core", "Command started")
        printRunHeader(runId, commandName, settings, sources)

        try:
            requireCsv(csvPath)
        except typer.Exit:
            logEvent(logger, logging.ERROR, runId, "csv", "CSV is missing or not accessible")
            report.fail("CSV is missing or not accessible")
            exitCode = 2
            return

        exitCode = runner(logger, report)

    finally:
        durationMs = getDurationMs(startMonotonic, time.monotonic())
        finalizeReport(
            report=report,
            durationMs=durationMs,
            logFile=logFilePath,
            reportDir=settings.report_dir,
        )
        reportPath = writeReportJson(report, settings.report_dir, f"report_{commandName}_{runId}")
        logEvent(logger, logging.INFO, runId, "report", f"Report written: {reportPath}")

        sys.stdout.flush()
        sys.stderr.flush()
        sys.stdout = originalStdout
        sys.stderr = originalStderr
        closeCommandLogger(logger)

        if exitCode is not None:
            raise typer.Exit(code=exitCode)


def runValidateCommand(
    ctx: typer.Context,
    csvPath: str | None,
    reportDuplicates: bool | None,
    reportInvalidRoles: bool | None,
    includeValidItems: bool,
) -> None:
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]
    options = ValidationOptions(
        report_duplicate_emails=reportDuplicates if reportDuplicates is not None else settings.report_duplicate_emails,
        report_invalid_roles=reportInvalidRoles if reportInvalidRoles is not None else settings.report_invalid_roles,
    )

    def execute(logger, report) -> int:
        try:
            text = read_roster_text(csvPath)
        except (OSError, UnicodeDecodeError) as exc:
            logEvent(logger, logging.ERROR, runId, "csv", f"CSV read error: {exc}")
            typer.echo(f"ERROR: CSV read error: {exc}", err=True)
            report.fail(f"CSV read error: {exc}")
            return 2

        usecase = ValidateUseCase(options=options, include_valid_items=includeValidItems)
        try:
            outcome = usecase.run(text=text, logger=logger, run_id=runId, report=report)
        except RosterFormatError as exc:
            logEvent(logger, logging.ERROR, runId, "csv", f"CSV format error: {exc}")
            typer.echo(f"ERROR: CSV format error: {exc}", err=True)
            report.fail(str(exc), exc.to_dict())
            return 2

        printRosterTable(outcome.parsed.records, outcome.findings)
        return outcome.exit_code

    runWithReport(
        ctx=ctx,
        commandName="validate",
        csvPath=csvPath,
        runner=execute,
    )


@app.callback()
def main(
    ctx: typer.Context,
    config: str | None = typer.Option(None, "--config", help="Path to config.yml"),
    runId: str | None = typer.Option(None, "--run-id", help="Run identifier (UUID). If omitted, generated."),
    logLevel: str | None = typer.Option(None, "--log-level", help="Log level: ERROR|WARN|INFO|DEBUG"),
    logDir: str | None = typer.Option(None, "--log-dir", help="Directory for logs."),
    reportDir: str | None = typer.Option(None, "--report-dir", help="Directory for reports."),
    reportItemsLimit: int | None = typer.Option(None, "--report-items-limit", help="Max report items stored"),
):
    """
    Назначение:
        Глобальная инициализация CLI:
        - генерирует/принимает run_id
        - загружает настройки (CLI > ENV > config > defaults)
        - создаёт каталоги log/report
        - сохраняет всё в ctx.obj для подкоманд
    """
    if not runId:
        runId = generate_run_id()

    cliOverrides = {
        "log_level": logLevel,
        "log_dir": logDir,
        "report_dir": reportDir,
        "report_items_limit": reportItemsLimit,
    }
    try:
        loaded = loadSettings(config_path=config, cli_overrides=cliOverrides)
    except (ValueError, TypeError) as exc:
        typer.echo(f"ERROR: invalid settings: {exc}", err=True)
        raise typer.Exit(code=2)

    ensureDir(loaded.settings.log_dir)
    ensureDir(loaded.settings.report_dir)

    ctx.obj = {
        "runId": runId,
        "settings": loaded.settings,
        "sources": loaded.sources_used,
        "configPath": config,
    }


@app.command()
def validate(
    ctx: typer.Context,
    csv: str | None = typer.Option(None, "--csv", help="Path to roster CSV"),
    reportDuplicates: bool | None = typer.Option(
        None, "--report-duplicates/--no-report-duplicates", help="Report duplicate emails"
    ),
    reportInvalidRoles: bool | None = typer.Option(
        None, "--report-invalid-roles/--no-report-invalid-roles", help="Report roles outside Root|Admin|Manager|Caller"
    ),
    includeValidItems: bool = typer.Option(False, "--include-valid-items", help="Store rows without findings in the report"),
):
    """
    Проверяет иерархию подчинения в ростере.
    """
    runValidateCommand(ctx, csv, reportDuplicates, reportInvalidRoles, includeValidItems)
