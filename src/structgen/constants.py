"""
Project-wide constants for structured generation
"""  # noqa: D200, D212, D415

# ==============================================================================
# API and Network Configuration
# ==============================================================================

NETWORK_TIMEOUT = 60.0  # seconds, per HTTP request
STAGE_TIMEOUT = 120.0  # seconds, per pipeline stage
MAX_OUTPUT_TOKENS = 8192  # some OpenAI-compatible backends default to 4096

# Sampling defaults shared by both adapter families
DEFAULT_TEMPERATURE = 0.7
DEFAULT_TOP_P = 0.95
DEFAULT_TOP_K = 40

# ==============================================================================
# Provider Defaults
# ==============================================================================

DEFAULT_PROVIDER = "google"
DEFAULT_MODEL = "gemini-2.0-flash"
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# ==============================================================================
# Response Handling
# ==============================================================================

RAW_PREVIEW_CHARS = 200  # chars of raw model output included in logs/errors
TRUNCATION_FINISH_REASONS = frozenset({"length", "MAX_TOKENS"})
