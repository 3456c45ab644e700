"""
Cost Splits GUI
- Record people and what each transaction cost, who paid it and how it is split
  (optionally item by item).
- See who paid what, who owes what, and the fewest payments that settle up.
- Keep state in JSON files, share links, or named pools.

Run:
  python cost_splits_gui.py [state.json | share-link]

Dependencies:
  pip install openpyxl
(Tkinter ships with most Python distributions; on some Linux you may need: sudo apt-get install python3-tk)
"""
from __future__ import annotations
import logging
import sys

try:
    import tkinter as tk
except ModuleNotFoundError:
    tk = None

from config import load_state_file
from main_app import CostSplitsApp
from share import load_state_from_url

logger = logging.getLogger(__name__)


def initial_pool(arg):
    """Pool given on the command line as a share link or a JSON file path"""
    if not arg:
        return None
    if "state=" in arg:
        return load_state_from_url(arg)
    return load_state_file(arg)


def main(argv=None):
    """Main entry point for the application"""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    if tk is None:
        raise RuntimeError(
            'tkinter is not available. Install it (e.g., on Ubuntu: sudo apt-get install python3-tk) '
            'and re-run to use the GUI.'
        )

    argv = sys.argv[1:] if argv is None else argv
    pool = None
    try:
        pool = initial_pool(argv[0] if argv else None)
    except Exception:
        logger.exception("Failed to load state from %r; starting empty", argv[0])

    root = tk.Tk()
    CostSplitsApp(root, pool)
    root.mainloop()


if __name__ == "__main__":
    main()
