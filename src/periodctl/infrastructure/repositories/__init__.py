"""Repositories encapsulating SQL per table."""
