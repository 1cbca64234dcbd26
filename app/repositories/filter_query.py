"""
Построение запроса списка организаций по фильтру из query-параметров.
В текст запроса попадают только имена атрибутов из белого списка; значения — только через параметры.
"""
from collections.abc import Mapping

from app.constants import FILTER_ATTRIBUTES
from app.errors import UnknownAttribute


def build_filter_query(base_query: str, criteria: Mapping[str, str]) -> tuple[str, list[str]]:
    """
    Добавляет к base_query условие "where 1=1 and <attr> = :pN ...".
    Возвращает текст запроса и список значений в порядке плейсхолдеров :p1..:pN.
    Ключи сравниваются без учёта регистра; первый неизвестный ключ -> UnknownAttribute.
    """
    parts = [base_query, " where 1=1"]
    args: list[str] = []
    for key, value in criteria.items():
        attribute = key.lower()
        if attribute not in FILTER_ATTRIBUTES:
            raise UnknownAttribute(key)
        args.append(value)
        parts.append(f" and {attribute} = :p{len(args)}")
    return "".join(parts), args


def bind_params(args: list[str]) -> dict[str, str]:
    """Позиционные значения -> именованные параметры p1..pN для text()."""
    return {f"p{i}": value for i, value in enumerate(args, start=1)}
