"""
rulega - Rule-set Genetic Algorithm

A Pittsburgh-style genetic algorithm: every individual is a set of
pattern-matching rules, and fitness is the number of labeled binary
examples the rule set classifies correctly.
"""

__version__ = "0.1.0"

# Expose common submodules for convenience
from .core import *  # noqa: F401,F403
from .evolution import *  # noqa: F401,F403
from .generation import *  # noqa: F401,F403
from .utils import *  # noqa: F401,F403

# Expose configuration presets as top-level names
from .config import PRESET_MINIMAL, PRESET_STANDARD, GaSpec  # noqa: F401
