"""Route modules mounted by the FastAPI app."""
