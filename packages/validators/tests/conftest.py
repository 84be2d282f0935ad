"""Pytest configuration for dataknobs_validators tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dataknobs_validators import V  # noqa: E402


@pytest.fixture
def thing_validator():
    """Object validator with a uuid id and a bounded name, both required."""
    return V.object({
        "id": V.string().uuid(),
        "name": V.string().min_length(3).max_length(100),
    }).required_keys(["id", "name"])


@pytest.fixture
def valid_uuid():
    """A well-formed uuid string."""
    return "c56a4180-65aa-42ec-a945-5fd21dec0538"
