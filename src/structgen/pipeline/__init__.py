"""Stage orchestration, result normalization and score calibration."""

from .calibration import calibrate_essay_scores
from .normalizer import default_for, normalize
from .orchestrator import StagePipeline

__all__ = ["StagePipeline", "calibrate_essay_scores", "default_for", "normalize"]
