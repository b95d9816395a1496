"""Entry point for ``python -m xva_import``."""

from .cli import app

if __name__ == "__main__":
    app()
