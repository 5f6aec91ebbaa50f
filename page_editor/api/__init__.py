"""API de contenu FastAPI."""
