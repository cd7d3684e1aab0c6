"""Pure domain layer: calendar arithmetic, strategies, naming, defects.

Nothing in this package performs I/O. Services in :mod:`periodctl.services`
combine these functions with the period repository.
"""
