"""Civicboard backend: city issue board with duplicate issue detection."""
