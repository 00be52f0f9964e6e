"""Desktop pygame host for the games."""
