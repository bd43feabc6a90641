"""Allow ``python -m tagver``."""

from __future__ import annotations

from tagver.cli.app import main

if __name__ == "__main__":
    raise SystemExit(main())
