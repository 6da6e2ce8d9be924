"""Google Sheets and Drive operations exposed as MCP tools."""
