"""Browser-driven suites for the back-office UI."""
