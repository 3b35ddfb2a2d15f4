"""Module execution entry point: ``python -m partgen``."""

from __future__ import annotations

from .api.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
