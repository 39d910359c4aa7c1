import copy
import json
from pathlib import Path

import pytest

from solution_core.parser import parse_solution

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def raw_document():
    """Fresh copy of the small three-employee solution document."""
    doc = json.loads((FIXTURES_DIR / "solution_small.json").read_text(encoding="utf-8"))
    return copy.deepcopy(doc)


@pytest.fixture
def solution(raw_document):
    return parse_solution(raw_document)
