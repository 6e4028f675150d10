"""Host adapters for the proofreading engine."""
