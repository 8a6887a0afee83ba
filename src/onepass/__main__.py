"""Allow ``python -m onepass``."""

from .cli import main

main()
