"""
Package entry point.

Allows running the application via:

    python -m coursegrid

This simply forwards execution to coursegrid.cli.main().
"""

from coursegrid.cli import main

if __name__ == "__main__":
    main()
