"""Allows running the CLI with ``python -m qiitasync``."""

from qiitasync.cli import main

if __name__ == "__main__":
    main()
