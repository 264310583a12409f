"""
Package entry point.

Allows running the application via:

    python -m fbnd

This simply forwards execution to fbnd.cli.main().
"""

from fbnd.cli import main

if __name__ == "__main__":
    main()
