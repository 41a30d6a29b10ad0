"""
Pytest configuration and shared hand-history fixtures
"""
import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hhnotes.parse.runner import parse_hand_history
from hand_samples import ALLIN_RUN_TWICE_HH, RAISE_MULTIPLE_HH, STRADDLE_SHOWDOWN_HH


@pytest.fixture
def straddle_hand():
    """STRADDLE_SHOWDOWN_HH parsed for its straddling small blind."""
    return parse_hand_history(STRADDLE_SHOWDOWN_HH, 'ThatWas 86761294')


@pytest.fixture
def raise_multiple_hand():
    return parse_hand_history(RAISE_MULTIPLE_HH, '86761294')


@pytest.fixture
def allin_hand():
    return parse_hand_history(ALLIN_RUN_TWICE_HH, '12121116')
