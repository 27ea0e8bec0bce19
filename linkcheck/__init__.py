"""linkcheck: fetch every URL in a text file and report titles or HTTP errors."""

import logging

__version__ = "0.1.0"

# Library logs stay silent unless the application configures logging.
logging.getLogger(__name__).addHandler(logging.NullHandler())
