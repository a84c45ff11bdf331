"""Interface ligne de commande de PlexOrg (Typer + Rich)."""
