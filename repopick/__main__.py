"""Module entrypoint for ``python -m repopick``.

All argument parsing and runtime setup happen in ``repopick.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
