from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class LsfError(Exception):
    """Base class of all errors raised while extracting an LSF course."""


class CourseDoesNotExistError(LsfError):
    def __init__(self, lsf_id: int):
        self.lsf_id = lsf_id
        super().__init__(f"course with id '{lsf_id}' does not exist")


class InvalidCourseTypeError(LsfError):
    def __init__(self, label: str):
        self.label = label
        super().__init__(f"invalid course type '{label}'")


class InvalidRotationError(LsfError):
    def __init__(self, label: str):
        self.label = label
        super().__init__(f"invalid rotation: '{label}'")


class InvalidSemesterTypeError(LsfError):
    def __init__(self, label: str):
        self.label = label
        super().__init__(f"invalid semester type: '{label}'")


class MalformedCourseIdError(LsfError):
    def __init__(self):
        super().__init__("malformed course id")


class MalformedWeeklyHoursError(LsfError):
    def __init__(self):
        super().__init__("malformed weekly hours")


class MalformedYearError(LsfError):
    def __init__(self):
        super().__init__("malformed year")


class SeminarType(str, Enum):
    NORMAL = "normal"
    BLOCK = "block"


class CourseType(str, Enum):
    LECTURE = "lecture"
    EXERCISE = "exercise"
    PRACTICAL = "practical"
    SEMINAR = "seminar"
    BLOCK_SEMINAR = "block_seminar"
    PROSEMINAR = "proseminar"
    TECH_PROJECT = "tech_project"
    PROJECT_GROUP = "project_group"
    OTHER = "other"  # record default, never parsed

    @property
    def seminar_type(self) -> Optional[SeminarType]:
        if self is CourseType.SEMINAR:
            return SeminarType.NORMAL
        if self is CourseType.BLOCK_SEMINAR:
            return SeminarType.BLOCK
        return None


COURSE_TYPE_LABELS = {
    "vorlesung": CourseType.LECTURE,
    "wahlpflichtvorlesung": CourseType.LECTURE,
    "vertiefungsvorlesung": CourseType.LECTURE,
    "übung": CourseType.EXERCISE,
    "uebung": CourseType.EXERCISE,
    "blockkurs": CourseType.EXERCISE,
    "seminar": CourseType.SEMINAR,
    "blockseminar": CourseType.BLOCK_SEMINAR,
    "proseminar": CourseType.PROSEMINAR,
    "praktikum": CourseType.PRACTICAL,
    "fachprojekt": CourseType.TECH_PROJECT,
    "projektgruppe": CourseType.PROJECT_GROUP,
}


def parse_course_type(label: str) -> CourseType:
    """Map an LSF "Veranstaltungsart" label to a CourseType.

    Raises:
        InvalidCourseTypeError: if the label is not part of the vocabulary
    """
    course_type = COURSE_TYPE_LABELS.get(label.strip().lower())
    if course_type is None:
        raise InvalidCourseTypeError(label)
    return course_type


class SemesterType(str, Enum):
    WINTER = "winter"
    SUMMER = "summer"

    def __str__(self) -> str:
        return "WiSe" if self is SemesterType.WINTER else "SoSe"


SEMESTER_TYPE_LABELS = {
    "wise": SemesterType.WINTER,
    "ws": SemesterType.WINTER,
    "winter": SemesterType.WINTER,
    "sose": SemesterType.SUMMER,
    "ss": SemesterType.SUMMER,
    "sommer": SemesterType.SUMMER,
}


def parse_semester_type(label: str) -> SemesterType:
    """Raises:
    InvalidSemesterTypeError: if the label is not a known semester
    """
    semester_type = SEMESTER_TYPE_LABELS.get(label.strip().lower())
    if semester_type is None:
        raise InvalidSemesterTypeError(label)
    return semester_type


class Semester(BaseModel):
    year: int
    semester_type: SemesterType

    def __str__(self) -> str:
        return f"{str(self.semester_type)} {self.year}"


class RotationKind(str, Enum):
    EVERY_SEMESTER = "every_semester"
    YEARLY = "yearly"


class Rotation(BaseModel):
    """How often a course is offered.

    A yearly rotation may carry the semester it is offered in; the LSF
    rhythm field does not contain it, it is filled in from the semester
    field after the whole page has been read.
    """

    kind: RotationKind = RotationKind.YEARLY
    semester: Optional[SemesterType] = None

    @classmethod
    def every_semester(cls) -> "Rotation":
        return cls(kind=RotationKind.EVERY_SEMESTER)

    @classmethod
    def yearly(cls, semester: Optional[SemesterType] = None) -> "Rotation":
        return cls(kind=RotationKind.YEARLY, semester=semester)

    def is_yearly(self) -> bool:
        return self.kind == RotationKind.YEARLY


ROTATION_LABELS = {
    "jährlich": RotationKind.YEARLY,
    "jedes 2. semester": RotationKind.YEARLY,
    "jedes semester": RotationKind.EVERY_SEMESTER,
}


def parse_rotation(label: str, semester: Optional[SemesterType] = None) -> Rotation:
    """Map an LSF "Rhythmus" label to a Rotation.

    Raises:
        InvalidRotationError: if the label is not part of the vocabulary
    """
    kind = ROTATION_LABELS.get(label.strip().lower())
    if kind is None:
        raise InvalidRotationError(label)
    if kind == RotationKind.EVERY_SEMESTER:
        return Rotation.every_semester()
    return Rotation.yearly(semester)


class Course(BaseModel):
    course_type: CourseType = CourseType.OTHER
    course_id: int = 0
    lsf_id: int = 0
    rotation: Rotation = Field(default_factory=Rotation)
    credits: int = Field(default=0, ge=0, le=255)
    name: str = ""
    short_name: Optional[str] = None
    weekly_hours: int = Field(default=0, ge=0, le=255)
    semester: Optional[Semester] = None
