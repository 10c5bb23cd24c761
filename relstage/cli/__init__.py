"""relstage command-line interface."""
