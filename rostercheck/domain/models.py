from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

SUPERVISOR_DELIMITER = ";"


class Role(str, Enum):
    """
    Назначение:
        Фиксированный набор ролей организации (от старшей к младшей).
    """

    ROOT = "Root"
    ADMIN = "Admin"
    MANAGER = "Manager"
    CALLER = "Caller"

    @classmethod
    def parse(cls, value: str | None) -> "Role | None":
        """
        Назначение:
            Точное сопоставление строки со значением роли; неизвестное значение -> None.
        """
        for role in cls:
            if role.value == value:
                return role
        return None


class FindingKind(str, Enum):
    """
    Назначение:
        Виды замечаний валидатора. Значение - человекочитаемая метка для отчётов.
    """

    HIERARCHY_VIOLATION = "Hierarchy Violation"
    MULTIPLE_SUPERVISORS = "Multiple Supervisors"
    CYCLE_DETECTED = "Cycle Detected"
    INVALID_SUPERVISOR = "Invalid Supervisor"
    # включаются через ValidationOptions
    DUPLICATE_EMAIL = "Duplicate Email"
    INVALID_ROLE = "Invalid Role"

    @property
    def code(self) -> str:
        return self.name


@dataclass(frozen=True)
class RosterRecord:
    """
    Назначение:
        Одна запись ростера в том виде, в каком она пришла из источника.

    Инварианты:
        - role и reports_to не нормализуются: валидатор сравнивает их как есть.
        - line_no - физический номер строки в исходном тексте (1-based), только для диагностики.
    """

    email: str
    full_name: str
    role: str
    reports_to: str = ""
    line_no: int | None = None

    @property
    def supervisors(self) -> tuple[str, ...]:
        """
        Назначение:
            Разбивает reports_to на ссылки на руководителей. Пустые фрагменты сохраняются.
        """
        return tuple(self.reports_to.split(SUPERVISOR_DELIMITER))

    @property
    def has_multiple_supervisors(self) -> bool:
        return SUPERVISOR_DELIMITER in self.reports_to


@dataclass(frozen=True)
class Finding:
    """
    Назначение:
        Замечание валидатора по конкретной записи.

    Поля:
        row_index: позиция записи в последовательности + 2 (заголовок и 1-based нумерация).
    """

    row_index: int
    email: str
    full_name: str
    kind: FindingKind
    detail: str


@dataclass(frozen=True)
class ParseResult:
    """
    Назначение:
        Результат разбора текста ростера.

    Поля:
        records: принятые записи в порядке строк.
        skipped_lines: номера строк, отброшенных из-за недостатка полей.
    """

    records: tuple[RosterRecord, ...]
    skipped_lines: tuple[int, ...] = ()


def row_index_for(position: int) -> int:
    return position + 2
