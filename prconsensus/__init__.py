"""prconsensus: review thread consensus and reviewer engagement for pull requests."""

__version__ = "0.1.0"
