"""HTTP query surface for environment statuses."""
