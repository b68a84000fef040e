"""공통 유틸리티 모음."""

from .config_loader import load_config, merge_config, section
from .timing import FpsTimer, LoopClock

__all__ = ["load_config", "merge_config", "section", "FpsTimer", "LoopClock"]
