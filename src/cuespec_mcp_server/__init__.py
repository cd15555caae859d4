"""CueSpec MCP Server: cue component specifications and technical drawings."""

__version__ = "0.1.0"
