"""Presentation layer: Rich rendering and JSON output of ServiceResult."""
