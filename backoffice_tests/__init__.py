"""
Back-office end-to-end test suites.

`backoffice_tests` stays importable so that `run_tests.py`, IDEs and CI jobs
can import page objects and framework helpers directly.
"""
