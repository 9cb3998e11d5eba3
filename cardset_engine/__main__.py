"""Entry point for running cardset_engine as a module.

Usage:
    python -m cardset_engine <command> [options]
"""
from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
