"""Desktop pygame window."""
