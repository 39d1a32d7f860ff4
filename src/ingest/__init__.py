"""Spreadsheet ingestion pipeline.

This module reads uploaded spreadsheets and normalizes their rows.
It prepares header-tagged, row-indexed datasets for the store layer.
"""
