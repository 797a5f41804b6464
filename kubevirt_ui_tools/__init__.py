"""Coverage, scaffolding, cluster and documentation tools for a Playwright UI test suite."""

__version__ = "0.1.0"