from __future__ import annotations

import sys
from pathlib import Path


def _ensure_repo_root_on_path() -> None:
    """Make ``thinktool`` importable when this file is run as a plain script."""
    pkg_dir = Path(__file__).resolve().parent
    repo_root_str = str(pkg_dir.parent)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


try:
    # python -m thinktool
    from .app import run  # type: ignore[attr-defined]
except ImportError:
    # python thinktool/__main__.py
    _ensure_repo_root_on_path()
    from thinktool.app import run  # type: ignore[attr-defined]


def main() -> int:
    """Entry point for running the drill from the command line."""
    return run()


if __name__ == "__main__":
    raise SystemExit(main())
