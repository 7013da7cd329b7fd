"""Domain records and wire models."""
