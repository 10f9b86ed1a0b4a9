"""Entry point for running the model host as a module."""

import asyncio
import sys

from .runner import main

if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
