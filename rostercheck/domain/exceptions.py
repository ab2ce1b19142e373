from __future__ import annotations

from typing import Iterable

from rostercheck.errors import AppError

REQUIRED_COLUMNS_MESSAGE = "CSV format invalid. Required columns: Email, FullName, Role, ReportsTo"


class RosterFormatError(AppError):
    """
    Назначение:
        Критическая ошибка формата входа: в заголовке нет обязательных колонок.
        Разбор прерывается целиком, частичный результат не возвращается.
    """

    def __init__(self, missing_columns: Iterable[str], message: str = REQUIRED_COLUMNS_MESSAGE) -> None:
        super().__init__(
            category="input",
            code="MALFORMED_INPUT",
            message=message,
            details={"missing_columns": list(missing_columns)},
        )

    @property
    def missing_columns(self) -> list[str]:
        return list(self.details.get("missing_columns", []))


__all__ = ["RosterFormatError", "REQUIRED_COLUMNS_MESSAGE"]
