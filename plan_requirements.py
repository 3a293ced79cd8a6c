from __future__ import annotations

import json
from enum import Enum
from typing import AbstractSet, Annotated, Iterable, Literal, Set, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from logger import logger


class RequirementType(str, Enum):
    NONE = "NONE"
    COURSE = "COURSE"
    ALL = "ALL"
    ANY = "ANY"


class BaseRequirement(BaseModel):
    """Common behaviour of all plan requirement nodes.

    Nodes are immutable; combining two nodes always yields a new node and
    child tuples are shared between parents instead of being copied.
    """

    model_config = ConfigDict(frozen=True)

    def is_empty(self) -> bool:
        return False

    def inner(self) -> Tuple[PlanRequirement, ...]:
        return ()

    def course_ids(self) -> Set[str]:
        ids: Set[str] = set()
        for child in self.inner():
            ids |= child.course_ids()
        return ids

    def is_satisfied_by(self, completed: AbstractSet[str]) -> bool:
        raise NotImplementedError

    def remaining(self, completed: AbstractSet[str]) -> PlanRequirement:
        raise NotImplementedError

    def and_with(self, other: PlanRequirement) -> PlanRequirement:
        """Conjunction of two requirements.

        Empty is the identity. Two All groups are flattened into one,
        anything else is wrapped in a new two-element All group.
        """
        if self.is_empty():
            return other
        if other.is_empty():
            return self
        if isinstance(self, All) and isinstance(other, All):
            return All(children=self.children + other.children)
        return All(children=(self, other))

    def or_with(self, other: PlanRequirement) -> PlanRequirement:
        """Disjunction of two requirements.

        Empty is the identity. Only two 1-of-N groups are flattened; every
        other pair (including k-of-N groups with k > 1) is wrapped in a new
        Any(1, ...) group.
        """
        if self.is_empty():
            return other
        if other.is_empty():
            return self
        if (
            isinstance(self, Any)
            and isinstance(other, Any)
            and self.required == 1
            and other.required == 1
        ):
            return Any(required=1, children=self.children + other.children)
        return Any(required=1, children=(self, other))

    def __and__(self, other: PlanRequirement) -> PlanRequirement:
        return self.and_with(other)

    def __or__(self, other: PlanRequirement) -> PlanRequirement:
        return self.or_with(other)

    def __repr__(self) -> str:
        return render(self)

    def __str__(self) -> str:
        return render(self)


class Empty(BaseRequirement):
    type: Literal[RequirementType.NONE] = RequirementType.NONE

    def is_empty(self) -> bool:
        return True

    def is_satisfied_by(self, completed: AbstractSet[str]) -> bool:
        return True

    def remaining(self, completed: AbstractSet[str]) -> PlanRequirement:
        return self


class Course(BaseRequirement):
    type: Literal[RequirementType.COURSE] = RequirementType.COURSE
    id: str

    def inner(self) -> Tuple[PlanRequirement, ...]:
        return (self,)

    def course_ids(self) -> Set[str]:
        return {self.id}

    def is_satisfied_by(self, completed: AbstractSet[str]) -> bool:
        return self.id in completed

    def remaining(self, completed: AbstractSet[str]) -> PlanRequirement:
        if self.id in completed:
            return Empty()
        return self


class All(BaseRequirement):
    type: Literal[RequirementType.ALL] = RequirementType.ALL
    children: Tuple[PlanRequirement, ...]

    def inner(self) -> Tuple[PlanRequirement, ...]:
        return self.children

    def is_satisfied_by(self, completed: AbstractSet[str]) -> bool:
        return all(child.is_satisfied_by(completed) for child in self.children)

    def remaining(self, completed: AbstractSet[str]) -> PlanRequirement:
        open_children = []
        for child in self.children:
            rest = child.remaining(completed)
            if not rest.is_empty():
                open_children.append(rest)
        return all_of(open_children)


class Any(BaseRequirement):
    type: Literal[RequirementType.ANY] = RequirementType.ANY
    required: int
    children: Tuple[PlanRequirement, ...]

    def inner(self) -> Tuple[PlanRequirement, ...]:
        return self.children

    def is_satisfied_by(self, completed: AbstractSet[str]) -> bool:
        satisfied = 0
        for child in self.children:
            if satisfied >= self.required:
                break
            if child.is_satisfied_by(completed):
                satisfied += 1
        return satisfied >= self.required

    def remaining(self, completed: AbstractSet[str]) -> PlanRequirement:
        # Residual of a k-of-N group: the unsatisfied children, of which
        # k minus the number already satisfied are still needed.
        open_children = []
        for child in self.children:
            rest = child.remaining(completed)
            if not rest.is_empty():
                open_children.append(rest)

        satisfied = len(self.children) - len(open_children)
        if satisfied >= self.required:
            return Empty()
        # Built directly: the residual of a threshold larger than the group
        # has no children left and can never be met.
        return Any(required=self.required - satisfied, children=tuple(open_children))


PlanRequirement = Annotated[
    Union[Empty, Course, All, Any],
    Field(discriminator="type"),
]

All.model_rebuild()
Any.model_rebuild()


## Construction
def empty() -> PlanRequirement:
    return Empty()


def course(course_id: str) -> PlanRequirement:
    return Course(id=course_id)


def all_of(items: Iterable[PlanRequirement]) -> PlanRequirement:
    """All of `items` are required. An empty collection yields Empty."""
    children = tuple(items)
    if not children:
        return Empty()
    return All(children=children)


def any_of(required: int, items: Iterable[PlanRequirement]) -> PlanRequirement:
    """At least `required` of `items` are required.

    An empty collection yields Empty regardless of `required`. Thresholds
    outside 1..len(items) are accepted but can never (or always) be met.
    """
    children = tuple(items)
    if not children:
        return Empty()
    if required < 1 or required > len(children):
        logger.warn(
            f"Degenerate threshold {required} for a group of {len(children)} requirements"
        )
    return Any(required=required, children=children)


def all_courses(course_ids: Iterable[str]) -> PlanRequirement:
    return all_of(Course(id=course_id) for course_id in course_ids)


def any_courses(required: int, course_ids: Iterable[str]) -> PlanRequirement:
    return any_of(required, (Course(id=course_id) for course_id in course_ids))


## Evaluation
def evaluate(node: PlanRequirement, completed: AbstractSet[str]) -> bool:
    """Check whether the completed course ids satisfy `node`."""
    return node.is_satisfied_by(completed)


def remaining(node: PlanRequirement, completed: AbstractSet[str]) -> PlanRequirement:
    """Return the part of `node` that is not yet satisfied by `completed`."""
    return node.remaining(completed)


def missing_courses(node: PlanRequirement, completed: AbstractSet[str]) -> Set[str]:
    """Course ids that still appear in the unsatisfied part of `node`."""
    return node.remaining(completed).course_ids()


## Rendering
def render(node: PlanRequirement, pretty: bool = False, indent: int = 0) -> str:
    """Structural debug representation of a requirement tree.

    Empty renders as `Empty`, courses as their quoted id, groups as
    `All([...])` and `Any(k, [...])`. With `pretty`, every child is put on
    its own indented line.
    """
    if isinstance(node, Empty):
        return "Empty"
    if isinstance(node, Course):
        return json.dumps(node.id, ensure_ascii=False)

    if isinstance(node, Any):
        prefix = f"Any({node.required}, "
    else:
        prefix = "All("

    if not pretty:
        inner = ", ".join(render(child) for child in node.children)
        return f"{prefix}[{inner}])"

    pad = " " * (indent + 4)
    lines = [f"{prefix}["]
    for child in node.children:
        lines.append(f"{pad}{render(child, pretty=True, indent=indent + 4)},")
    lines.append(" " * indent + "])")
    return "\n".join(lines)


## Loading
def _parse_children(data) -> list:
    children = data["children"]
    if not isinstance(children, list):
        raise ValueError(f"Requirement children must be a list, got: {children!r}")
    return [parse_requirement(req) for req in children]


def parse_requirement(data) -> PlanRequirement:
    """Build a requirement tree from its JSON representation.

    Groups are built through the constructors, so empty groups collapse to
    Empty just like hand-built ones.

    Raises:
        ValueError: on an unknown type or a malformed node
    """
    if not isinstance(data, dict):
        raise ValueError(f"Requirement must be an object, got: {data!r}")

    req_type = data.get("type", RequirementType.NONE.value)
    try:
        match req_type:
            case RequirementType.NONE:
                return Empty()
            case RequirementType.COURSE:
                course_id = data["id"]
                if not isinstance(course_id, str):
                    raise ValueError(f"Course id must be a string, got: {course_id!r}")
                return Course(id=course_id)
            case RequirementType.ALL:
                return all_of(_parse_children(data))
            case RequirementType.ANY:
                return any_of(int(data["required"]), _parse_children(data))
    except KeyError as e:
        raise ValueError(f"Requirement of type {req_type} is missing {e}") from e
    except TypeError as e:
        raise ValueError(f"Malformed requirement of type {req_type}: {e}") from e

    raise ValueError(f"Unknown requirement type: {req_type}")


def load_plan(plan_path) -> PlanRequirement:
    """Load a plan definition from a JSON file.

    Raises:
        FileNotFoundError: if file does not exist
        ValueError: if JSON is malformed or not a valid requirement tree
    """
    try:
        with open(plan_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise FileNotFoundError(f"Plan file not found: {plan_path}") from e
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse {plan_path} as JSON: {e}") from e

    return parse_requirement(data)
