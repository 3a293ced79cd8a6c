# get_courses.py: Fetch course pages from the LSF catalog and extract course records.
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, Iterator, List, Optional

import requests
from bs4 import BeautifulSoup
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from catalog import (
    Course,
    CourseDoesNotExistError,
    LsfError,
    MalformedCourseIdError,
    MalformedWeeklyHoursError,
    MalformedYearError,
    InvalidRotationError,
    InvalidSemesterTypeError,
    Semester,
    parse_course_type,
    parse_rotation,
    parse_semester_type,
)
from config import DEFAULT_LSF_BASE_URL, Settings
from logger import logger

PAGE_PARAMS = {
    "state": "verpublish",
    "status": "init",
    "vmfile": "no",
    "moduleCall": "webInfo",
    "publishConfFile": "webInfo",
    "publishSubDir": "veranstaltung",
}

TABLE_ROW_SELECTOR = ".form > table:first-of-type tr"
TABLE_CELL_SELECTOR = "th, td"
HEADING_SELECTOR = ".form > h1:nth-child(1)"


def fetch_with_retry(url: str, attempts: int = 3, **kwargs) -> str:
    """Fetch URL with retry logic and return text."""

    @retry(
        retry=retry_if_exception_type(requests.RequestException),
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=1, max=16),
        reraise=True,
    )
    def _fetch() -> str:
        resp = requests.get(url, **kwargs)
        resp.raise_for_status()
        return resp.text

    return _fetch()


def fetch_course_page(lsf_id: int, settings: Optional[Settings] = None) -> str:
    """Download the publication page of one LSF catalog entry."""
    settings = settings or Settings()
    params = dict(PAGE_PARAMS, publishid=lsf_id)
    return fetch_with_retry(
        settings.lsf_base_url or DEFAULT_LSF_BASE_URL,
        attempts=settings.retry_attempts,
        params=params,
        timeout=settings.request_timeout,
    )


def _parse_byte(text: str) -> int:
    value = int(text)
    if value < 0 or value > 255:
        raise ValueError(f"{value} is out of range 0..255")
    return value


def parse_semester_field(text: str):
    """Split an LSF "Semester" value of the form `<sem>-<year>[/<year>]`.

    Returns a (semester_type, year) tuple where either part may be None.

    Raises:
        MalformedYearError: if the year part is not a number
    """
    parts = text.split("-")
    semester_type = None
    try:
        semester_type = parse_semester_type(parts[0])
    except InvalidSemesterTypeError as e:
        logger.trace(str(e))

    if len(parts) < 2:
        return semester_type, None

    year_text = parts[1].split("/")[0]
    try:
        year = int(year_text.strip())
    except ValueError as e:
        raise MalformedYearError() from e

    return semester_type, year


def extract_course(html: str, lsf_id: int) -> Course:
    """Extract a course record from an LSF publication page.

    Raises:
        LsfError: if the page does not describe a course or a field is malformed
    """
    document = BeautifulSoup(html, "html.parser")

    heading = document.select_one(HEADING_SELECTOR)
    if heading is None:
        raise CourseDoesNotExistError(lsf_id)
    name = heading.get_text().split("-")[0].strip()

    logger.debug(f'Processing course with name "{name}"')

    cells = [
        cell
        for row in document.select(TABLE_ROW_SELECTOR)
        for cell in row.select(TABLE_CELL_SELECTOR)
    ]

    course = Course(lsf_id=lsf_id, name=name)
    fields = {}
    semester_type = None
    year = None

    for header, data in zip(cells, cells[1:]):
        if header.name != "th":
            continue

        header_text = header.get_text().strip()
        data_content = data.get_text().strip()
        logger.trace(f"Header: {header_text}, Data: {data_content}")

        match header_text:
            case "Veranstaltungsart":
                fields["course_type"] = parse_course_type(data_content)
            case "Veranstaltungsnummer":
                try:
                    fields["course_id"] = int(data_content)
                except ValueError as e:
                    raise MalformedCourseIdError() from e
            case "Kurztext":
                if data_content:
                    fields["short_name"] = data_content
            case "SWS":
                try:
                    fields["weekly_hours"] = _parse_byte(data_content)
                except ValueError as e:
                    raise MalformedWeeklyHoursError() from e
            case "Rhythmus":
                try:
                    fields["rotation"] = parse_rotation(data_content)
                except InvalidRotationError as e:
                    logger.warn(f"{e} (lsf id {lsf_id}), using default rotation")
            case "Semester":
                parsed_type, parsed_year = parse_semester_field(data_content)
                if parsed_type is not None:
                    semester_type = parsed_type
                if parsed_year is not None:
                    year = parsed_year
            case "Credits":
                try:
                    fields["credits"] = _parse_byte(data_content)
                except ValueError:
                    logger.trace(f"Ignoring credits value '{data_content}'")

    rotation = fields.get("rotation", course.rotation)
    if rotation.is_yearly():
        fields["rotation"] = rotation.model_copy(update={"semester": semester_type})
    if semester_type is not None and year is not None:
        fields["semester"] = Semester(year=year, semester_type=semester_type)

    return course.model_copy(update=fields)


def parse_course(lsf_id: int, settings: Optional[Settings] = None) -> Course:
    """Fetch and extract one catalog entry."""
    html = fetch_course_page(lsf_id, settings)
    return extract_course(html, lsf_id)


def fetch_courses(
    lsf_ids: Iterable[int], settings: Optional[Settings] = None
) -> Iterator[Course]:
    """Fetch catalog entries concurrently, yielding records as they complete.

    A failing entry is logged and skipped; it never affects the others.
    """
    settings = settings or Settings()
    lsf_ids = list(lsf_ids)
    if not lsf_ids:
        return

    with ThreadPoolExecutor(max_workers=settings.max_workers) as executor:
        future_to_id = {
            executor.submit(parse_course, lsf_id, settings): lsf_id
            for lsf_id in lsf_ids
        }

        for future in as_completed(future_to_id):
            lsf_id = future_to_id[future]
            try:
                course = future.result()
            except LsfError as e:
                logger.warn(f"{e} (lsf id {lsf_id})")
                continue
            except requests.RequestException as e:
                logger.warn(f"Failed to fetch course {lsf_id}: {e}")
                continue
            yield course


def collect_courses(
    lsf_ids: Iterable[int], settings: Optional[Settings] = None
) -> List[Course]:
    courses = []
    for course in fetch_courses(lsf_ids, settings):
        logger.debug(course.model_dump_json(indent=2))
        courses.append(course)
    return courses
