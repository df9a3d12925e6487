"""
Command Decoder

DESIGN DECISION: Decoding is a pure step in front of every mutation.

STAGE 1 - SHAPE:
- Keyword / remainder split
- Marker presence (/by, /at, /amount, /on)
- Token counts

STAGE 2 - VALUES:
- Strict YYYY-MM-DD calendar dates
- Non-negative integer indices and amounts
- Index bounds against the current collection size

Nothing here touches a store. A command that fails decoding never
reaches one, so a rejected command can never leave a store half updated.

IMPORTANT: Decoding NEVER silently fixes input. Surrounding whitespace
is trimmed; everything else is either accepted or rejected with a
typed error.
"""

import re
from datetime import date
from typing import Optional

from taskledger.models.command import (
    BadFormatError,
    BadOperationError,
    EmptyDescriptionError,
    UnrecognizedCommandError,
)
from taskledger.models.expense import Expense
from taskledger.models.task import Task, TaskKind, make_task


DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
NUMBER_PATTERN = re.compile(r"[0-9]+")

TASK_KEYWORDS: dict[str, TaskKind] = {
    "todo": TaskKind.TODO,
    "deadline": TaskKind.DEADLINE,
    "event": TaskKind.EVENT,
}

# Marker separating description from date, per dated task kind
DATE_MARKERS: dict[TaskKind, str] = {
    TaskKind.DEADLINE: "/by",
    TaskKind.EVENT: "/at",
}

AMOUNT_MARKER = "/amount"
DATE_ON_MARKER = "/on"


def _split_keyword(line: str) -> tuple[str, Optional[str]]:
    """Split a line into its keyword and the (stripped) remainder, if any."""
    parts = line.strip().split(maxsplit=1)
    if not parts:
        return "", None
    if len(parts) < 2 or not parts[1].strip():
        return parts[0], None
    return parts[0], parts[1].strip()


def is_valid_number(token: str) -> bool:
    """Return True if token is a non-negative integer written in ASCII digits."""
    return NUMBER_PATTERN.fullmatch(token) is not None


def parse_date(text: str, command: str = "date") -> date:
    """
    Parse the date at the end of a piece of text.

    Takes the last whitespace-delimited token and parses it as a strict
    ISO calendar date (YYYY-MM-DD).

    Args:
        text: Text ending in a date, e.g. "date 2024-03-01"
        command: Command reported in the error, if any

    Returns:
        The parsed date

    Raises:
        BadFormatError: If there is no token or it is not a valid date
    """
    tokens = text.split()
    token = tokens[-1].lstrip() if tokens else ""
    if not DATE_PATTERN.fullmatch(token):
        raise BadFormatError(
            f"Not a valid date: {token!r}",
            command=command,
            expected="<YYYY-MM-DD>",
        )
    try:
        return date.fromisoformat(token)
    except ValueError:
        raise BadFormatError(
            f"Not a valid calendar date: {token!r}",
            command=command,
            expected="<YYYY-MM-DD>",
        )


def parse_task_command(line: str) -> Task:
    """
    Build a task from a todo / deadline / event command.

    Forms:
        todo <description>
        deadline <description> /by <YYYY-MM-DD>
        event <description> /at <YYYY-MM-DD>

    Raises:
        EmptyDescriptionError: If the description is missing
        BadFormatError: If the marker is missing or the date is invalid
        UnrecognizedCommandError: If the keyword is not a task keyword
    """
    keyword, remainder = _split_keyword(line)
    kind = TASK_KEYWORDS.get(keyword.lower())
    if kind is None:
        raise UnrecognizedCommandError(
            f"Not a task command: {keyword!r}",
            command=keyword or None,
        )
    command = keyword.lower()

    if remainder is None:
        raise EmptyDescriptionError(
            f"The description of a {command} cannot be empty",
            command=command,
        )

    if kind == TaskKind.TODO:
        return make_task(kind, remainder)

    marker = DATE_MARKERS[kind]
    description, found, tail = remainder.partition(marker)
    if not found:
        raise BadFormatError(
            f"Missing '{marker}' in {command}",
            command=command,
            expected=f"{command} <DESCRIPTION> {marker} <YYYY-MM-DD>",
        )
    description = description.strip()
    if not description:
        raise EmptyDescriptionError(
            f"The description of a {command} cannot be empty",
            command=command,
        )
    occurs_on = parse_date(tail, command)
    return make_task(kind, description, occurs_on)


def parse_index_command(line: str, collection_size: int) -> int:
    """
    Extract the 1-based index from a command like "done 2".

    Args:
        line: The raw command line
        collection_size: Current number of items in the target store

    Returns:
        The index, guaranteed to satisfy 1 <= index <= collection_size

    Raises:
        BadOperationError: Wrong token count, or index out of range
        BadFormatError: Second token is not a non-negative integer
    """
    tokens = line.split()
    command = tokens[0].lower() if tokens else None
    if len(tokens) != 2:
        raise BadOperationError(
            f"Expected exactly one index after '{command}'",
            command=command,
        )
    if not is_valid_number(tokens[1]):
        raise BadFormatError(
            f"Not a valid index: {tokens[1]!r}",
            command=command,
            expected=f"{command} <INDEX>",
        )
    index = int(tokens[1])
    if index < 1 or index > collection_size:
        raise BadOperationError(
            f"No item #{index}; there are {collection_size} item(s)",
            command=command,
        )
    return index


def parse_find_query(line: str) -> str:
    """
    Extract the search text from "find <text>".

    Only the first word after the keyword is used.

    Raises:
        EmptyDescriptionError: If there is nothing to search for
    """
    tokens = line.split()
    if len(tokens) < 2:
        raise EmptyDescriptionError(
            "The search text of a find cannot be empty",
            command="find",
        )
    return tokens[1]


def parse_expense_command(line: str) -> Expense:
    """
    Build an expense from "expense <name> /amount <n> /on <YYYY-MM-DD>".

    Raises:
        EmptyDescriptionError: Missing remainder, marker, or empty segment
        BadFormatError: Non-numeric amount, comma in name, or invalid date
    """
    _, remainder = _split_keyword(line)
    expected = "expense <NAME> /amount <AMOUNT> /on <YYYY-MM-DD>"
    if remainder is None:
        raise EmptyDescriptionError(
            "The description of an expense cannot be empty",
            command="expense",
        )

    name, found_amount, rest = remainder.partition(AMOUNT_MARKER)
    if not found_amount:
        raise EmptyDescriptionError(
            f"Missing '{AMOUNT_MARKER}' in expense. Expected: {expected}",
            command="expense",
        )
    amount_text, found_on, date_text = rest.partition(DATE_ON_MARKER)
    if not found_on:
        raise EmptyDescriptionError(
            f"Missing '{DATE_ON_MARKER}' in expense. Expected: {expected}",
            command="expense",
        )

    name = name.strip()
    amount_text = amount_text.strip()
    if not name or not amount_text or not date_text.strip():
        raise EmptyDescriptionError(
            f"Every part of an expense is required. Expected: {expected}",
            command="expense",
        )
    if "," in name:
        raise BadFormatError(
            f"Expense name cannot contain a comma: {name!r}",
            command="expense",
        )
    if not is_valid_number(amount_text):
        raise BadFormatError(
            f"Not a valid amount: {amount_text!r}",
            command="expense",
            expected=expected,
        )

    incurred_on = parse_date(date_text, "expense")
    return Expense(name=name, amount=int(amount_text), incurred_on=incurred_on)


def decode_persisted_task(line: str) -> Task:
    """
    Rebuild a task from its persisted record.

    Record: <T|D|E>,<true|false>,<description>[,<YYYY-MM-DD>]

    The date, when present, is always the last field; everything between
    the done flag and the date is the description, commas included.

    Raises:
        BadFormatError: Unknown tag, too few fields, or invalid values
    """
    fields = line.rstrip("\r\n").split(",")
    if len(fields) < 3:
        raise BadFormatError(f"Too few fields in task record: {line!r}")

    try:
        kind = TaskKind(fields[0])
    except ValueError:
        raise BadFormatError(f"Unknown task tag {fields[0]!r} in record: {line!r}")
    done = fields[1].strip().lower() == "true"

    if kind != TaskKind.TODO and len(fields) < 4:
        raise BadFormatError(f"Missing date in task record: {line!r}")

    try:
        if kind == TaskKind.TODO:
            return make_task(kind, ",".join(fields[2:]), done=done)
        occurs_on = date.fromisoformat(fields[-1].strip())
        return make_task(kind, ",".join(fields[2:-1]), occurs_on, done=done)
    except ValueError as e:
        raise BadFormatError(f"Invalid task record {line!r}: {e}")


def decode_persisted_expense(line: str) -> Expense:
    """
    Rebuild an expense from its persisted record.

    Record: <name>,<amount>,<YYYY-MM-DD> (exactly three fields)

    Raises:
        BadFormatError: Wrong field count or invalid values
    """
    fields = line.rstrip("\r\n").split(",")
    if len(fields) != 3:
        raise BadFormatError(f"Expected 3 fields in expense record: {line!r}")

    name, amount_text, date_text = fields
    if not is_valid_number(amount_text.strip()):
        raise BadFormatError(f"Invalid amount in expense record: {line!r}")
    try:
        return Expense(
            name=name,
            amount=int(amount_text.strip()),
            incurred_on=date.fromisoformat(date_text.strip()),
        )
    except ValueError as e:
        raise BadFormatError(f"Invalid expense record {line!r}: {e}")
