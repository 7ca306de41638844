"""
Test fixtures package.

Factories, fakes and recording repositories shared across the test suite.
"""
