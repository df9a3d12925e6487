"""
Tests for the command decoder and the persisted-record decoders.
"""

import pytest
from datetime import date

from taskledger.decoding import (
    decode_persisted_expense,
    decode_persisted_task,
    is_valid_number,
    parse_date,
    parse_expense_command,
    parse_find_query,
    parse_index_command,
    parse_task_command,
)
from taskledger.models.command import (
    BadFormatError,
    BadOperationError,
    EmptyDescriptionError,
    UnrecognizedCommandError,
)
from taskledger.models.expense import Expense
from taskledger.models.task import Deadline, Event, Todo


class TestParseDate:
    """Tests for strict date parsing."""

    def test_parses_last_token(self):
        """Test that the last token is the date."""
        assert parse_date("date 2024-03-01") == date(2024, 3, 1)
        assert parse_date("   2024-03-01") == date(2024, 3, 1)

    def test_rejects_unpadded_date(self):
        """Test that the shape must be exactly YYYY-MM-DD."""
        with pytest.raises(BadFormatError):
            parse_date("date 2024-3-1")
        with pytest.raises(BadFormatError):
            parse_date("date 20240301")

    def test_rejects_impossible_dates(self):
        """Test that the calendar is checked."""
        with pytest.raises(BadFormatError):
            parse_date("date 2024-13-01")
        with pytest.raises(BadFormatError):
            parse_date("date 2023-02-29")

    def test_accepts_leap_day(self):
        """Test a valid leap day."""
        assert parse_date("date 2024-02-29") == date(2024, 2, 29)

    def test_rejects_missing_date(self):
        """Test that empty text is a format error."""
        with pytest.raises(BadFormatError):
            parse_date("")

    def test_reports_calling_command(self):
        """Test that the error names the command it came from."""
        with pytest.raises(BadFormatError) as exc_info:
            parse_date("x", "deadline")
        assert exc_info.value.command == "deadline"


class TestParseTaskCommand:
    """Tests for todo / deadline / event decoding."""

    def test_todo(self):
        """Test a plain todo."""
        task = parse_task_command("todo read book")
        assert isinstance(task, Todo)
        assert task.description == "read book"
        assert task.done is False

    def test_keyword_is_case_insensitive(self):
        """Test that the keyword matches regardless of case."""
        assert isinstance(parse_task_command("TODO read book"), Todo)

    def test_todo_without_description(self):
        """Test that a bare keyword is an empty description."""
        with pytest.raises(EmptyDescriptionError):
            parse_task_command("todo")
        with pytest.raises(EmptyDescriptionError):
            parse_task_command("todo    ")

    def test_deadline(self):
        """Test a deadline with its date."""
        task = parse_task_command("deadline submit report /by 2024-03-01")
        assert isinstance(task, Deadline)
        assert task.description == "submit report"
        assert task.by == date(2024, 3, 1)

    def test_event(self):
        """Test an event with its date."""
        task = parse_task_command("event team lunch /at 2024-05-05")
        assert isinstance(task, Event)
        assert task.description == "team lunch"
        assert task.at == date(2024, 5, 5)

    def test_deadline_invalid_date(self):
        """Test that an impossible date is a format error."""
        with pytest.raises(BadFormatError):
            parse_task_command("deadline submit report /by 2024-13-01")

    def test_deadline_missing_marker(self):
        """Test that a deadline without /by is a format error."""
        with pytest.raises(BadFormatError) as exc_info:
            parse_task_command("deadline submit report")
        assert "/by" in str(exc_info.value)

    def test_event_with_wrong_marker(self):
        """Test that an event needs /at, not /by."""
        with pytest.raises(BadFormatError):
            parse_task_command("event party /by 2024-05-05")

    def test_deadline_without_description(self):
        """Test that a marker with nothing before it is an empty description."""
        with pytest.raises(EmptyDescriptionError):
            parse_task_command("deadline /by 2024-03-01")

    def test_unknown_keyword(self):
        """Test that non-task keywords are not recognized here."""
        with pytest.raises(UnrecognizedCommandError):
            parse_task_command("chore sweep floor")


class TestParseIndexCommand:
    """Tests for index extraction and bounds."""

    def test_valid_index(self):
        """Test an index inside the collection."""
        assert parse_index_command("done 2", 3) == 2
        assert parse_index_command("delete 3", 3) == 3

    def test_missing_index(self):
        """Test that a missing index is a bad operation."""
        with pytest.raises(BadOperationError):
            parse_index_command("done", 3)

    def test_extra_tokens(self):
        """Test that more than one index is a bad operation."""
        with pytest.raises(BadOperationError):
            parse_index_command("done 1 2", 3)

    def test_non_numeric_index(self):
        """Test that words and signs are format errors."""
        with pytest.raises(BadFormatError):
            parse_index_command("done two", 3)
        with pytest.raises(BadFormatError):
            parse_index_command("done -1", 3)

    def test_zero_is_out_of_range(self):
        """Test that indices are 1-based."""
        with pytest.raises(BadOperationError):
            parse_index_command("done 0", 3)

    def test_index_past_end(self):
        """Test that an index past the end is a bad operation."""
        with pytest.raises(BadOperationError):
            parse_index_command("delete 99", 2)

    def test_empty_collection(self):
        """Test that nothing can be addressed in an empty collection."""
        with pytest.raises(BadOperationError):
            parse_index_command("done 1", 0)

    def test_is_valid_number(self):
        """Test the digit check."""
        assert is_valid_number("42")
        assert is_valid_number("0")
        assert not is_valid_number("4.2")
        assert not is_valid_number("")


class TestParseFindQuery:
    """Tests for find."""

    def test_query(self):
        """Test the word after the keyword is the query."""
        assert parse_find_query("find book") == "book"

    def test_only_first_word_is_used(self):
        """Test that later words are ignored."""
        assert parse_find_query("find read book") == "read"

    def test_missing_query(self):
        """Test that a bare find is an empty description."""
        with pytest.raises(EmptyDescriptionError):
            parse_find_query("find")


class TestParseExpenseCommand:
    """Tests for expense decoding."""

    def test_expense(self):
        """Test a complete expense command."""
        expense = parse_expense_command("expense coffee /amount 5 /on 2024-01-10")
        assert expense == Expense(name="coffee", amount=5, incurred_on=date(2024, 1, 10))
        assert expense.to_record() == "coffee,5,2024-01-10"

    def test_multi_word_name(self):
        """Test that names may contain spaces."""
        expense = parse_expense_command("expense train ticket /amount 12 /on 2024-01-10")
        assert expense.name == "train ticket"

    def test_bare_keyword(self):
        """Test that a bare keyword is an empty description."""
        with pytest.raises(EmptyDescriptionError):
            parse_expense_command("expense")

    def test_missing_markers(self):
        """Test that missing markers are empty descriptions."""
        with pytest.raises(EmptyDescriptionError):
            parse_expense_command("expense coffee 5")
        with pytest.raises(EmptyDescriptionError):
            parse_expense_command("expense coffee /amount 5")

    def test_empty_segments(self):
        """Test that every segment is required."""
        with pytest.raises(EmptyDescriptionError):
            parse_expense_command("expense /amount 5 /on 2024-01-10")
        with pytest.raises(EmptyDescriptionError):
            parse_expense_command("expense coffee /amount /on 2024-01-10")
        with pytest.raises(EmptyDescriptionError):
            parse_expense_command("expense coffee /amount 5 /on")

    def test_bad_amount(self):
        """Test that amounts must be non-negative integers."""
        with pytest.raises(BadFormatError):
            parse_expense_command("expense coffee /amount five /on 2024-01-10")
        with pytest.raises(BadFormatError):
            parse_expense_command("expense coffee /amount -5 /on 2024-01-10")

    def test_bad_date(self):
        """Test that the date is checked."""
        with pytest.raises(BadFormatError):
            parse_expense_command("expense coffee /amount 5 /on 2024-01-32")

    def test_comma_in_name(self):
        """Test that names cannot break the record format."""
        with pytest.raises(BadFormatError):
            parse_expense_command("expense tea,cake /amount 5 /on 2024-01-10")


class TestDecodePersistedTask:
    """Tests for rebuilding tasks from file lines."""

    def test_todo_record(self):
        """Test a todo line."""
        task = decode_persisted_task("T,false,read book")
        assert task == Todo(description="read book")

    def test_done_deadline_record(self):
        """Test a completed deadline line."""
        task = decode_persisted_task("D,true,submit report,2024-03-01")
        assert isinstance(task, Deadline)
        assert task.done is True
        assert task.by == date(2024, 3, 1)

    def test_done_flag_is_case_insensitive(self):
        """Test that TRUE is read as done."""
        assert decode_persisted_task("T,TRUE,read book").done is True

    def test_description_keeps_commas(self):
        """Test that inner fields belong to the description."""
        task = decode_persisted_task("E,false,lunch, then coffee,2024-03-01")
        assert task.description == "lunch, then coffee"
        assert task.occurs_on == date(2024, 3, 1)

    def test_trailing_newline(self):
        """Test that line endings are ignored."""
        assert decode_persisted_task("T,false,read book\r\n").description == "read book"

    @pytest.mark.parametrize("task", [
        Todo(description="read book", done=True),
        Deadline(description="pay rent, then relax", by=date(2024, 2, 29)),
        Event(description="party", at=date(2024, 12, 31), done=True),
    ])
    def test_record_round_trip(self, task):
        """Test that decoding a task's record gives the task back."""
        assert decode_persisted_task(task.to_record()) == task

    @pytest.mark.parametrize("line", [
        "T,false",
        "X,false,read book",
        "D,false,submit report",
        "D,false,submit report,not-a-date",
        "T,false,",
        "",
    ])
    def test_malformed_records(self, line):
        """Test that malformed lines are format errors."""
        with pytest.raises(BadFormatError):
            decode_persisted_task(line)


class TestDecodePersistedExpense:
    """Tests for rebuilding expenses from file lines."""

    def test_expense_record(self):
        """Test a well-formed expense line."""
        expense = decode_persisted_expense("coffee,5,2024-01-10")
        assert expense == Expense(name="coffee", amount=5, incurred_on=date(2024, 1, 10))

    @pytest.mark.parametrize("line", [
        "coffee,5",
        "tea,cake,5,2024-01-10",
        "coffee,five,2024-01-10",
        "coffee,5,bad",
        ",5,2024-01-10",
    ])
    def test_malformed_records(self, line):
        """Test that malformed lines are format errors."""
        with pytest.raises(BadFormatError):
            decode_persisted_expense(line)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
