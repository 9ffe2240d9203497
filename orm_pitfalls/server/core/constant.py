"""Project-wide constants for the reproducer server."""

PROJECT_NAME = "ORM Pitfalls Reproducer"
PROBLEMS_PREFIX = "/problems"
SOLUTIONS_PREFIX = f"{PROBLEMS_PREFIX}/solutions"
API_VERSION = "0.1.0"
SCHEMA_VERSION = "v1"
