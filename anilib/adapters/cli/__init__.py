"""Interface en ligne de commande d'AniLib (typer + rich)."""
