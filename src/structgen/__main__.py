"""CLI entry point for running one operation.

Usage:
    python -m structgen brainstorm topic="Remote work"
    python -m structgen grade-essay essay=@essay.txt --provider deepseek
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
