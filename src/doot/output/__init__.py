"""Output formatters: rich terminal, JSON, confirmation prompt."""
