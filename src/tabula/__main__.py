"""Entry point for running Tabula as a module.

Usage:
    python -m tabula [command] [options]

Example:
    python -m tabula render page.html.j2 --var title=Home
    python -m tabula validate page.html.j2
"""

from tabula.cli import app

if __name__ == "__main__":
    app()
