"""CSV export of derived views."""
