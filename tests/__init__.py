"""
Test suite for the daycare directory API.
"""
