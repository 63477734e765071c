"""Entry point for ``python -m stateful_worker``."""

import sys

from .host import run_host

if __name__ == "__main__":
    sys.exit(run_host())
