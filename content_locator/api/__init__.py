"""WordPress REST API access."""
