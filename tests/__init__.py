"""
Test suite for stablex

Contains:
- tests/unit/          : Unit tests for individual modules
"""
