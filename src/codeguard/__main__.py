"""Entry point for running CodeGuard as a module.

Usage:
    python -m codeguard [command] [options]

Example:
    python -m codeguard profile ./my-project
    python -m codeguard analyze ./my-project --output report.json
"""

from codeguard.cli import app

if __name__ == "__main__":
    app()
