"""Document storage and recovery layer.

This module persists dataset records and the metadata registry.
It powers dataset reloading, header recovery, and the SDK client.
"""
