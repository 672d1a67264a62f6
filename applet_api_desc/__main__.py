"""Module entrypoint for `python -m applet_api_desc`."""

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
