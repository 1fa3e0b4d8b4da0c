"""CLI entry point for configuration introspection.

Usage:
    python -m structgen.config
    python -m structgen.config --check
    python -m structgen.config --json
"""

import sys

from .introspection import main

if __name__ == "__main__":
    sys.exit(main())
