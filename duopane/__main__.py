"""Module entrypoint for ``python -m duopane``.

All argument parsing and runtime setup happen in ``duopane.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
