"""Activity pattern engine — synthetic commit schedules without git access."""

from commitpulse.engines.activity_pattern.generator import ActivityPatternGenerator, generate
from commitpulse.engines.activity_pattern.models import ActivityEvent, PatternParameters
from commitpulse.engines.activity_pattern.presets import PRESETS, get_preset, params_from_args

__all__ = [
    "PRESETS",
    "ActivityEvent",
    "ActivityPatternGenerator",
    "PatternParameters",
    "generate",
    "get_preset",
    "params_from_args",
]
