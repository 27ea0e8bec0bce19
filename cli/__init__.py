"""linkcheck command-line interface."""
