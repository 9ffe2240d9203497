"""ORM pitfalls reproducer.

A FastAPI service and test-suite showing where immutability and value
equality in Python classes clash with SQLAlchemy's instrumentation.
"""

__version__ = "0.1.0"
