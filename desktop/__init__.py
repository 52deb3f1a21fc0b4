"""Desktop client for the budget tracker API."""
