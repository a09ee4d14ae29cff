"""
HTTP API contract-test runner.

A specification module lists test cases grouped by resource; the runner sends
each case as an HTTP request, validates the response, and threads one shared
state record through every case in declared order.
"""

__version__ = "0.1.0"
