"""GitHub API access and token acquisition."""

__all__: list[str] = []
