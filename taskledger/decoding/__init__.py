"""Command decoding package."""

from taskledger.decoding.decoder import (
    decode_persisted_expense,
    decode_persisted_task,
    is_valid_number,
    parse_date,
    parse_expense_command,
    parse_find_query,
    parse_index_command,
    parse_task_command,
)

__all__ = [
    "decode_persisted_expense",
    "decode_persisted_task",
    "is_valid_number",
    "parse_date",
    "parse_expense_command",
    "parse_find_query",
    "parse_index_command",
    "parse_task_command",
]
