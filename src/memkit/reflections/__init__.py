"""Reflection entries fetched from a date-organized GitHub repository."""
