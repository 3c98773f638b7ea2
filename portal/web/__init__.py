"""HTTP adapter: FastAPI app, panels, components and routes."""
