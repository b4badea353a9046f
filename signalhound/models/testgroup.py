"""Pydantic models for the TestGrid tab table endpoint."""

from collections.abc import Sequence
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Statuses(BaseModel):
    """Run-length encoded cell status."""

    count: int = 0
    value: int = 0


class Test(BaseModel):
    """One row of a test group; every list is aligned with the columns."""

    __test__ = False

    model_config = ConfigDict(populate_by_name=True)

    name: str
    original_name: str = Field(default="", alias="original-name")
    messages: Sequence[str] = Field(default_factory=list)
    short_texts: Sequence[str] = Field(default_factory=list)
    statuses: Sequence[Statuses] = Field(default_factory=list)
    target: str = ""


class TestGroup(BaseModel):
    """Full result table of a tab.

    Columns are runs ordered most recent first: ``timestamps[0]`` is the
    latest run and ``changelists[i]`` is the revision of column ``i``.
    """

    __test__ = False

    model_config = ConfigDict(populate_by_name=True)

    test_group_name: str = Field(default="", alias="test-group-name")
    query: str = ""
    status: str = ""
    changelists: Sequence[str] = Field(default_factory=list)
    column_ids: Sequence[str] = Field(default_factory=list)
    column_header_names: Sequence[str] = Field(
        default_factory=list, alias="column-header-names"
    )
    groups: Sequence[str] = Field(default_factory=list)
    tests: Sequence[Test] = Field(default_factory=list)
    row_ids: Sequence[str] = Field(default_factory=list)
    timestamps: Sequence[int] = Field(default_factory=list)
    stale_test_threshold: int = Field(default=0, alias="stale-test-threshold")
    num_stale_tests: int = Field(default=0, alias="num-stale-tests")
    description: str = ""
    overall_status: int = Field(default=0, alias="overall-status")

    @model_validator(mode="after")
    def check_column_alignment(self) -> Self:
        """Reject tables whose per-column lists disagree in length."""
        columns = len(self.timestamps)
        if len(self.changelists) != columns:
            raise ValueError(
                f"changelists has {len(self.changelists)} entries, "
                f"expected {columns} (one per timestamp)"
            )
        for test in self.tests:
            if len(test.short_texts) != columns or len(test.messages) != columns:
                raise ValueError(
                    f"test {test.name!r} has {len(test.short_texts)} short texts and "
                    f"{len(test.messages)} messages, expected {columns}"
                )
        return self
