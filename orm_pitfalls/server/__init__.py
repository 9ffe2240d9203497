"""FastAPI server exposing the problem and solution scenarios."""
