"""MCP tool server for periodctl (optional ``mcp`` extra)."""
