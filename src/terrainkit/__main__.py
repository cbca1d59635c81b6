"""Allow ``python -m terrainkit``."""

from .cli import main

main()
