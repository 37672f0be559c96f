"""SpendLens command line interface."""
