"""Built-in plugins shipped with periodctl."""
