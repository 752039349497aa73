import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

SAMPLES = Path(__file__).parent / "samples"


@pytest.fixture
def sample():
    """Load a sample puzzle input by day number."""
    def load(day: int) -> str:
        return (SAMPLES / f"day{day:02d}.txt").read_text()
    return load
