"""User-facing interfaces: the typer CLI and the FastAPI routes."""
