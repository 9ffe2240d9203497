"""Core building blocks: database layer, inspection helpers, logging and monitoring."""
