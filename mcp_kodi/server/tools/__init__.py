"""MCP tool registrations for the Kodi server."""
