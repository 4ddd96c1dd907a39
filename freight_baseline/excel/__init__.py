"""Spreadsheet reading and cell value helpers."""
