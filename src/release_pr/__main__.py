from __future__ import annotations

from release_pr.main import main

if __name__ == "__main__":
    raise SystemExit(main())
