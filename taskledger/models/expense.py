"""
Expense Model

An expense is a named, dated, whole-number amount.

DESIGN DECISION: Expenses are frozen. Once recorded they can only be
deleted, never edited, so the persisted file never has to track edits.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskledger.models.task import format_date


class Expense(BaseModel):
    """A single recorded expense."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    amount: int = Field(
        ...,
        ge=0,
        description="Amount spent, in whole currency units"
    )
    incurred_on: date = Field(
        ...,
        description="Date the expense was incurred"
    )

    @field_validator('name')
    @classmethod
    def reject_commas(cls, v: str) -> str:
        """The persisted record has no escaping, so commas cannot be stored."""
        if "," in v:
            raise ValueError("Expense name cannot contain a comma")
        return v

    @property
    def occurs_on(self) -> date:
        return self.incurred_on

    @property
    def search_text(self) -> str:
        return self.name

    def describe(self) -> str:
        return f"{self.name}: ${self.amount} (on: {format_date(self.incurred_on)})"

    def to_record(self) -> str:
        return f"{self.name},{self.amount},{self.incurred_on.isoformat()}"
