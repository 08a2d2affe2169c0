"""pysh test suite."""
