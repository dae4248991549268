"""Interface web d'AniLib (FastAPI, JSON et SSE)."""
