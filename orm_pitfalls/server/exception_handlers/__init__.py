"""
Exception handlers for the reproducer server.

This package contains custom exception handlers for different error types
and a setup function to register them with the FastAPI application.
"""

from .global_handler import entity_not_found_handler, global_exception_handler, setup_exception_handlers

__all__ = ["entity_not_found_handler", "global_exception_handler", "setup_exception_handlers"]
