"""covhtml CLI."""
