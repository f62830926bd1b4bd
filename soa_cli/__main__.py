"""``python -m soa_cli`` runs the same CLI as the ``soa-cli`` script."""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
