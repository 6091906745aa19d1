"""Module entry point: python -m visit_finder ..."""

from __future__ import annotations

from visit_finder.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
