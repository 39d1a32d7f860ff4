"""Dataset preview layer.

This module turns loaded datasets into display-ready tables
for the command-line preview surface.
"""
