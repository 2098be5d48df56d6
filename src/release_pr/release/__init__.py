"""Release aggregation: pending pull request resolution, rendering and sync.

Each step is a plain function or a small class so it can be tested without git
or network access.
"""

__all__: list[str] = []
