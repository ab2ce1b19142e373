from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from rostercheck.domain.models import Finding, RosterRecord, row_index_for
from rostercheck.domain.validation.cycles import CycleDetector
from rostercheck.domain.validation.index import build_index, find_duplicate_emails
from rostercheck.domain.validation.rules import (
    DuplicateEmailRule,
    InvalidRoleRule,
    MultipleSupervisorsRule,
    RecordRule,
    RuleContext,
    SupervisorRule,
    check_records,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationOptions:
    """
    Назначение:
        Необязательные проверки сверх базовой политики.
        По умолчанию выключены: результат совпадает с четырьмя базовыми видами замечаний.
    """

    report_duplicate_emails: bool = False
    report_invalid_roles: bool = False


class RosterValidator:
    """
    Назначение/ответственность:
        Проверяет иерархию ростера: индекс -> проход правил -> поиск циклов.

    Инварианты:
        - Замечания правил идут в порядке записей, замечания о циклах - после них.
        - Экземпляр не хранит состояния между вызовами validate().
    """

    def __init__(self, options: ValidationOptions | None = None) -> None:
        self.options = options or ValidationOptions()
        self.rules = self._build_rules()

    def _build_rules(self) -> tuple[RecordRule, ...]:
        rules: list[RecordRule] = []
        if self.options.report_invalid_roles:
            rules.append(InvalidRoleRule())
        if self.options.report_duplicate_emails:
            rules.append(DuplicateEmailRule())
        rules.append(MultipleSupervisorsRule())
        rules.append(SupervisorRule())
        return tuple(rules)

    def validate(self, records: Iterable[RosterRecord]) -> list[Finding]:
        roster = list(records)
        index = build_index(roster)
        ctx = RuleContext(
            index=index,
            duplicates=find_duplicate_emails(roster) if self.options.report_duplicate_emails else {},
            last_row={record.email: row_index_for(position) for position, record in enumerate(roster)},
        )
        findings = check_records(roster, ctx, self.rules)
        rule_count = len(findings)
        findings.extend(CycleDetector(roster, index).detect())
        logger.debug(
            "validated records=%s rules=%s rule_findings=%s cycle_findings=%s",
            len(roster),
            ",".join(rule.name for rule in self.rules),
            rule_count,
            len(findings) - rule_count,
        )
        return findings


def validate_roster(records: Iterable[RosterRecord], options: ValidationOptions | None = None) -> list[Finding]:
    return RosterValidator(options).validate(records)
