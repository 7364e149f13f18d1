"""pngedit - non-destructive PNG editing with a live Dear PyGui preview."""

__version__ = "0.1.0"
