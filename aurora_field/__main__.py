"""Module entry to expose `python -m aurora_field` CLI.

Delegates to `aurora_field.cli.main`.
"""

import sys

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
