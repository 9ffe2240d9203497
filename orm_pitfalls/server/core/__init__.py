"""Server core: configuration and project constants."""
