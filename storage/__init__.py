"""Loading and holding the readings table."""
