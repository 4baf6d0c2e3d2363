"""Module entrypoint for ``python -m treeofwork``.

This keeps module-mode execution behavior identical to the CLI script.
All argument parsing and session setup happen in ``treeofwork.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
