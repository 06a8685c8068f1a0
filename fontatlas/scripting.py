"""
fontatlas.scripting - frame for main scripts

licence: https://opensource.org/licenses/MIT
"""

import sys
import logging
from contextlib import contextmanager


@contextmanager
def wrap_main(debug=False):
    """Main script context: set up logging and report errors."""
    if debug:
        loglevel = logging.DEBUG
    else:
        loglevel = logging.WARNING
    logging.basicConfig(level=loglevel, format='%(levelname)s: %(message)s', force=True)
    try:
        yield
    except Exception as exc:
        logging.error(exc)
        if debug:
            raise
        sys.exit(1)
