# bachelor_plan.py: Requirement definition of the computer science bachelor programme
from plan_requirements import PlanRequirement, all_courses, any_courses, empty

REQUIRED_COURSES = [
    "040105",  # DAP 1
    "040115",  # DAP 2
    "040101",  # RS
    "040111",  # BS
    "040501",  # MafI 1
    "040503",  # MafI 2
    "040113",  # RvS
    "040125",  # Logik
    "040121",  # HaPra
    "050358",  # WrumS
    "040131",  # IS
    "040135",  # SWT
    "040141",  # GTI
    "080624",  # ETKT
]

SOPRA_COURSES = [
    "040137",  # during the semester
    "040138",  # during the semester break
]

SOFTWARE_ELECTIVES = [
    "040215",  # ÜBau
    "040217",  # FuPro
    "040211",  # SWK
]

SOFTWARE_ELECTIVES_REQUIRED = 2


def build_bachelor_requirements() -> PlanRequirement:
    """Build the bachelor plan definition.

    Called once at startup; the returned tree is immutable and can be
    handed to any number of readers.
    """
    req = empty()

    req &= all_courses(REQUIRED_COURSES)

    # SoPra
    req &= any_courses(1, SOPRA_COURSES)

    # Software Wahlpflicht
    req &= any_courses(SOFTWARE_ELECTIVES_REQUIRED, SOFTWARE_ELECTIVES)

    return req
