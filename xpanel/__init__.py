"""xpanel - supervised web panel process with one-shot admin commands."""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
