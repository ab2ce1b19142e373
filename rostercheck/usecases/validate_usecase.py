from __future__ import annotations

import logging
from dataclasses import dataclass

from rostercheck.domain.models import Finding, ParseResult, row_index_for
from rostercheck.domain.parsing.roster_parser import parse_roster_text
from rostercheck.domain.reporting.collector import ReportCollector
from rostercheck.domain.reporting.grouping import findings_by_email
from rostercheck.domain.validation.validator import RosterValidator, ValidationOptions
from rostercheck.loggingSetup import logEvent


@dataclass(frozen=True)
class ValidateOutcome:
    """
    Назначение:
        Результат проверки ростера для слоя представления.
    """

    parsed: ParseResult
    findings: list[Finding]

    @property
    def exit_code(self) -> int:
        return 1 if self.findings else 0


class ValidateUseCase:
    """
    Назначение/ответственность:
        Use-case проверки ростера: разбор текста -> валидация -> отчёт.

    Ошибки:
        RosterFormatError из парсера не перехватывается - решение о коде выхода
        принимает вызывающий.
    """

    def __init__(
        self,
        options: ValidationOptions,
        include_valid_items: bool = False,
    ) -> None:
        self.validator = RosterValidator(options)
        self.include_valid_items = include_valid_items

    def run(
        self,
        text: str,
        logger: logging.Logger,
        run_id: str,
        report: ReportCollector,
    ) -> ValidateOutcome:
        parsed = parse_roster_text(text)
        records = list(parsed.records)
        logEvent(logger, logging.INFO, run_id, "parse", f"records={len(records)} skipped_lines={len(parsed.skipped_lines)}")
        if parsed.skipped_lines:
            logEvent(
                logger,
                logging.DEBUG,
                run_id,
                "parse",
                "dropped short lines: " + ",".join(str(n) for n in parsed.skipped_lines),
            )

        findings = self.validator.validate(records)
        grouped = findings_by_email(findings)

        report.summary.rows_skipped = len(parsed.skipped_lines)
        report.count_findings(findings)
        for position, record in enumerate(records):
            row_findings = grouped.get(record.email, [])
            report.add_record(
                row_index=row_index_for(position),
                record=record,
                findings=row_findings,
                store=bool(row_findings) or self.include_valid_items,
            )

        for finding in findings:
            logEvent(
                logger,
                logging.WARNING,
                run_id,
                "validate",
                f"row={finding.row_index} email={finding.email} kind={finding.kind.code} detail={finding.detail}",
            )
        logEvent(logger, logging.INFO, run_id, "validate", f"findings={len(findings)}")
        return ValidateOutcome(parsed=parsed, findings=findings)
