"""Entry point for running clozeprep as a module.

Usage:
    python -m clozeprep [options]
"""
from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
