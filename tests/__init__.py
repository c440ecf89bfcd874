"""Test suite for refviewers.

This package contains unit tests covering identity resolution, author
aggregation, ranking, format conversion and display helpers, plus
integration tests for the CLI and web surfaces. To run the tests,
execute `pytest` from the project root.
"""
