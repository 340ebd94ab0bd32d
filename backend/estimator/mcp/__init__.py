"""MCP stdio server exposing the estimation records as JSON-RPC tools."""
