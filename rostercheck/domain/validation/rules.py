from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from rostercheck.domain.models import Finding, FindingKind, Role, RosterRecord, row_index_for
from rostercheck.domain.validation.policy import requirement_for


@dataclass(frozen=True)
class RuleContext:
    """
    Назначение:
        Общие данные прохода правил, собранные один раз на запуск.

    Поля:
        index: email -> запись (последняя при дублях).
        duplicates: email -> число вхождений (только повторяющиеся).
        last_row: email -> row_index последнего вхождения.
    """

    index: dict[str, RosterRecord]
    duplicates: dict[str, int]
    last_row: dict[str, int]


class RecordRule(Protocol):
    """
    Назначение:
        Контракт правила, проверяющего одну запись ростера.
    """

    name: str

    def apply(self, record: RosterRecord, row_index: int, ctx: RuleContext, findings: list[Finding]) -> None: ...


def _finding(record: RosterRecord, row_index: int, kind: FindingKind, detail: str) -> Finding:
    return Finding(
        row_index=row_index,
        email=record.email,
        full_name=record.full_name,
        kind=kind,
        detail=detail,
    )


class InvalidRoleRule:
    name = "invalid_role"

    def apply(self, record: RosterRecord, row_index: int, ctx: RuleContext, findings: list[Finding]) -> None:
        if Role.parse(record.role) is not None:
            return
        expected = ", ".join(role.value for role in Role)
        findings.append(
            _finding(record, row_index, FindingKind.INVALID_ROLE, f"Unknown role '{record.role}'; expected one of {expected}")
        )


class DuplicateEmailRule:
    name = "duplicate_email"

    def apply(self, record: RosterRecord, row_index: int, ctx: RuleContext, findings: list[Finding]) -> None:
        count = ctx.duplicates.get(record.email)
        if count is None:
            return
        findings.append(
            _finding(
                record,
                row_index,
                FindingKind.DUPLICATE_EMAIL,
                f"Email {record.email} appears {count} times; "
                f"the last occurrence (row {ctx.last_row[record.email]}) is used as supervisor",
            )
        )


class MultipleSupervisorsRule:
    """
    Назначение:
        Помечает запись, у которой в reports_to есть разделитель.
        Дальнейшие проверки записи не подавляются.
    """

    name = "multiple_supervisors"

    def apply(self, record: RosterRecord, row_index: int, ctx: RuleContext, findings: list[Finding]) -> None:
        if record.has_multiple_supervisors:
            findings.append(
                _finding(
                    record,
                    row_index,
                    FindingKind.MULTIPLE_SUPERVISORS,
                    f"User reports to multiple supervisors: {record.reports_to}",
                )
            )


class SupervisorRule:
    """
    Назначение:
        Для каждой непустой ссылки на руководителя проверяет, что он существует
        и что его роль допустима для роли подчинённого.

    Поведение:
        - Ссылки нет в индексе -> INVALID_SUPERVISOR, проверка ролей для неё пропускается.
        - Роль руководителя не подходит -> HIERARCHY_VIOLATION (по одному на ссылку).
    """

    name = "supervisor"

    def apply(self, record: RosterRecord, row_index: int, ctx: RuleContext, findings: list[Finding]) -> None:
        requirement = requirement_for(record.role)
        for reference in record.supervisors:
            if not reference:
                continue
            supervisor = ctx.index.get(reference)
            if supervisor is None:
                findings.append(
                    _finding(
                        record,
                        row_index,
                        FindingKind.INVALID_SUPERVISOR,
                        f"Supervisor {reference} does not exist",
                    )
                )
                continue
            if requirement is None or requirement.permits(supervisor.role):
                continue
            findings.append(
                _finding(
                    record,
                    row_index,
                    FindingKind.HIERARCHY_VIOLATION,
                    f"{record.role} ({record.email}) must report {requirement.wording}, "
                    f"but reports to {supervisor.role} ({supervisor.email})",
                )
            )


DEFAULT_RULES: tuple[RecordRule, ...] = (MultipleSupervisorsRule(), SupervisorRule())


def check_records(
    records: list[RosterRecord],
    ctx: RuleContext,
    rules: tuple[RecordRule, ...] = DEFAULT_RULES,
) -> list[Finding]:
    """
    Назначение:
        Прогоняет правила по записям в порядке ввода.

    Выходные данные:
        list[Finding] - по записям, внутри записи в порядке правил.
    """
    findings: list[Finding] = []
    for position, record in enumerate(records):
        row_index = row_index_for(position)
        for rule in rules:
            rule.apply(record, row_index, ctx, findings)
    return findings
