"""
Test fixtures package for whitelist-merkle tests.

- common.py: address and leaf factories, whitelist file helpers

Usage:
    from fixtures.common import make_addresses, make_leaf_values
"""
