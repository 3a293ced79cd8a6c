"""Pytest fixtures for plan requirement and catalog tests."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path so the top-level modules can be imported
sys.path.insert(0, str(Path(__file__).parent.parent))

from plan_requirements import course  # noqa: E402


@pytest.fixture(autouse=True)
def monkeypatch_env(monkeypatch):
    """Silence the logger for every test."""
    monkeypatch.setenv("ENV", "test")
    return monkeypatch


@pytest.fixture
def leaves():
    """Four independent course leaves a, b, c, d."""
    return tuple(course(code) for code in ("A", "B", "C", "D"))


@pytest.fixture
def completed_sets():
    """Every subset of the course ids used by the `leaves` fixture."""
    codes = ["A", "B", "C", "D"]
    subsets = []
    for mask in range(1 << len(codes)):
        subsets.append({code for i, code in enumerate(codes) if mask & (1 << i)})
    return subsets


COURSE_PAGE = """
<html><body>
<div class="form">
<h1>Datenstrukturen, Algorithmen und Programmierung 1 - Vorlesung</h1>
<table>
<tr><th>Veranstaltungsart</th><td> Vorlesung </td><th>Veranstaltungsnummer</th><td>040105</td></tr>
<tr><th>Semester</th><td>WiSe-2024/25</td><th>SWS</th><td>4</td></tr>
<tr><th>Rhythmus</th><td>jährlich</td><th>Kurztext</th><td>DAP1</td></tr>
<tr><th>Credits</th><td>6</td></tr>
</table>
<table>
<tr><th>SWS</th><td>not-a-number</td></tr>
</table>
</div>
</body></html>
"""


@pytest.fixture
def course_page():
    return COURSE_PAGE


@pytest.fixture
def missing_page():
    return "<html><body><div class='form'><p>Keine Veranstaltung</p></div></body></html>"
