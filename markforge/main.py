from __future__ import annotations

import sys

from markforge.app import run_app


def main() -> int:
    """Console entrypoint for `markforge [path]` and `python -m markforge.main`."""
    return run_app(sys.argv)


if __name__ == "__main__":
    raise SystemExit(main())
