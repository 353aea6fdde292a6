"""
Entry point for running the station monitor as a module.

Usage:
    python -m station_monitor [minutes]
"""

from .cli import main

if __name__ == "__main__":
    main()
