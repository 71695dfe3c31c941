"""Recipe catalog web service."""
