from datetime import date
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _TableModel(BaseModel):
    """Base for shapes read from the data-preparation JSON (camelCase keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


# ── Scripture references ─────────────────────────────────────────────

class ReadingRef(_TableModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True)

    book: str = Field(min_length=1)
    start_chapter: int = Field(ge=1)
    start_verse: int | None = Field(default=None, ge=1)  # None = from the start of the chapter
    end_chapter: int = Field(ge=1)
    end_verse: int | None = Field(default=None, ge=1)  # None = to the end of the chapter

    def label(self) -> str:
        """Human-readable reference, e.g. "Genesis 1:20-2:4"."""
        if self.start_chapter == self.end_chapter:
            if self.start_verse is None and self.end_verse is None:
                return f"{self.book} {self.start_chapter}"
            if self.start_verse is not None and self.end_verse is not None:
                return f"{self.book} {self.start_chapter}:{self.start_verse}-{self.end_verse}"
            if self.start_verse is not None:
                return f"{self.book} {self.start_chapter}:{self.start_verse}"
            return f"{self.book} {self.start_chapter}:1-{self.end_verse}"

        if self.start_verse is None and self.end_verse is None:
            return f"{self.book} {self.start_chapter}-{self.end_chapter}"

        start = f"{self.start_chapter}:{self.start_verse}" if self.start_verse is not None else f"{self.start_chapter}"
        end = f"{self.end_chapter}:{self.end_verse}" if self.end_verse is not None else f"{self.end_chapter}"
        return f"{self.book} {start}-{end}"


class DailyReadings(_TableModel):
    first: list[ReadingRef] = Field(default_factory=list)
    second: list[ReadingRef] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "DailyReadings":
        return cls()

    def is_empty(self) -> bool:
        return not self.first and not self.second


# ── Civil-calendar table ("MM-DD" keyed) ─────────────────────────────

class CivilDayEntry(_TableModel):
    morning: DailyReadings = Field(default_factory=DailyReadings)
    evening: DailyReadings = Field(default_factory=DailyReadings)


# ── Liturgical-key table (regular + fixed) ───────────────────────────

class LectionaryReading(_TableModel):
    primary: list[ReadingRef] = Field(default_factory=list)
    alternative: list[ReadingRef] | None = None

    @model_validator(mode="before")
    @classmethod
    def bare_list_is_primary(cls, value: Any) -> Any:
        if isinstance(value, list):
            return {"primary": value}
        return value


class LiturgicalSessionEntry(_TableModel):
    first: LectionaryReading | None = None
    second: LectionaryReading | None = None

    def primary_readings(self) -> DailyReadings:
        return DailyReadings(
            first=self.first.primary if self.first else [],
            second=self.second.primary if self.second else [],
        )


class RegularDayEntry(_TableModel):
    day_label: str | None = None
    morning: LiturgicalSessionEntry | None = None
    evening: LiturgicalSessionEntry | None = None


class FixedDayEntry(_TableModel):
    day_label: str | None = None
    name: str | None = None
    first_evensong: LiturgicalSessionEntry | None = None
    morning: LiturgicalSessionEntry | None = Field(
        default=None,
        validation_alias=AliasChoices("morning", "mattins"),
    )
    second_evensong: LiturgicalSessionEntry | None = None


# ── Sequential (day-number) tables ───────────────────────────────────

class McheyneDayEntry(_TableModel):
    day: int = Field(ge=1)
    morning: list[ReadingRef] = Field(default_factory=list)
    evening: list[ReadingRef] = Field(default_factory=list)


class BibleProjectDayEntry(_TableModel):
    day: int = Field(ge=1)
    section: str | None = None
    reading: list[ReadingRef] = Field(default_factory=list)
    psalm: ReadingRef | None = None


# ── HTTP responses ───────────────────────────────────────────────────

class LiturgicalDayResponse(BaseModel):
    date: date
    season: str
    week_of_season: int
    day_of_week: int
    name: str
    is_holy_day: bool
    holy_day_name: str | None
    holy_day_rank: str | None
    collect_id: str
    is_sunday: bool
    psalms_day: int


class MoveableFeastsResponse(BaseModel):
    year: int
    feasts: dict[str, date]


class PsalterResponse(BaseModel):
    date: date
    session: Literal["morning", "evening"]
    psalms_day: int
    psalms: list[int]
    omit_venite: bool
    references: list[str]


class ReadingsResponse(BaseModel):
    date: date
    session: str
    plan: str
    plan_day: int | None = None
    plan_status: Literal["not_started", "active", "complete"] | None = None
    first: list[ReadingRef]
    second: list[ReadingRef]
    labels: dict[str, list[str]]
