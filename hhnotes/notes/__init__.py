"""
Note synthesis and enrichment for parsed hands.
"""

from .synthesizer import synthesize, synthesize_street
from .enrich import merge, normalize_units, sanitize_artifacts, strip_showed_token
from .visual import HandVisual, build_hand_visual_model
from .context import build_hand_history_context

__all__ = [
    'synthesize',
    'synthesize_street',
    'merge',
    'normalize_units',
    'sanitize_artifacts',
    'strip_showed_token',
    'HandVisual',
    'build_hand_visual_model',
    'build_hand_history_context',
]
