"""Entry point for ``python -m cloudboard``."""

from cloudboard.cli.main import main

if __name__ == "__main__":
    main()
