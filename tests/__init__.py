"""
Test suite for the numerical core

Contains:
- tests/unit/          : Unit tests for individual modules
"""
