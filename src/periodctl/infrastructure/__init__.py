"""Infrastructure layer: SQLite persistence and the Ledger unit."""
