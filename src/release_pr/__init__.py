"""Release pull request aggregator.

Keeps a single long-lived `staging -> production` pull request whose body lists
the pull requests merged into staging but not yet released:
- pending pull requests resolved from merge commits and `refs/pull/*/head`
- deterministic checklist description
- idempotent create-or-update of the release pull request
"""

__version__ = "0.1.0"

from release_pr.config import ReleaseConfig, ReleasePrSettings

__all__ = ["__version__", "ReleaseConfig", "ReleasePrSettings"]
