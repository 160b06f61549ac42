"""Module entry point: python -m fit_clean ..."""

from __future__ import annotations

from fit_clean.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
