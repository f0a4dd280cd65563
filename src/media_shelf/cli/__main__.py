"""Allow running the CLI with ``python -m media_shelf.cli``."""

from .main import main

if __name__ == "__main__":
    main()
