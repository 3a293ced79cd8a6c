import sys
from typing import List, Optional, Tuple

from bachelor_plan import build_bachelor_requirements
from catalog import Course
from config import Settings, get_settings, parse_catalog_ids
from get_courses import collect_courses
from logger import logger
from plan_requirements import PlanRequirement, load_plan, render


def parse_args(argv) -> Optional[List[int]]:
    """Parse command-line arguments.

    Args:
        argv: list of command-line arguments (excluding script name)

    Returns:
        list of LSF catalog ids, or None to use the configured ones

    Raises:
        ValueError: if arguments are invalid
    """
    if not argv:
        return None
    if any(arg in ("-h", "--help") for arg in argv):
        raise ValueError("Usage: main.py [lsf-id ...]")

    ids = parse_catalog_ids(",".join(argv))
    if not ids:
        raise ValueError("Usage: main.py [lsf-id ...]")
    return ids


def build_plan(settings: Settings) -> PlanRequirement:
    """Build the plan definition once, before any concurrent work starts."""
    if settings.plan_path:
        logger.info(f"Loading plan definition from {settings.plan_path}")
        return load_plan(settings.plan_path)
    logger.info("Building bachelor plan definition")
    return build_bachelor_requirements()


def main(
    settings: Settings, lsf_ids: Optional[List[int]] = None
) -> Tuple[PlanRequirement, List[Course]]:
    plan = build_plan(settings)
    logger.debug(render(plan, pretty=True))
    logger.info(f"Plan references {len(plan.course_ids())} courses")

    lsf_ids = lsf_ids if lsf_ids is not None else settings.catalog_ids
    logger.info(f"Fetching {len(lsf_ids)} catalog entries")
    courses = collect_courses(lsf_ids, settings)
    logger.info(f"Extracted {len(courses)} of {len(lsf_ids)} courses")

    return plan, courses


if __name__ == "__main__":
    try:
        lsf_ids = parse_args(sys.argv[1:])
        settings = get_settings()
        main(settings, lsf_ids)
    except (ValueError, FileNotFoundError) as e:
        logger.error(str(e))
        sys.exit(1)
