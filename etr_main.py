"""Epictree - Keep child issue checklists of parent issues in sync.

Entry point module. Re-exports the public API so scripts and tests can
``from etr_main import ...``.
"""

from epictree_core import *  # noqa: F401,F403
from epictree_core.cli import app, main

if __name__ == "__main__":
    main()
