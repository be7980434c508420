"""
Integration tests for rebound.

Drive whole retry loops through the public entry points, including
decorated pytest test functions.
"""
