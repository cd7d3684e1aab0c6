"""Service layer: period business logic returning ServiceResult.

Services may import from the domain and infrastructure layers.
They must never import from commands, output, or mcp.
"""
