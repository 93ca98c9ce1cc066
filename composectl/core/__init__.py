"""Core project discovery, status and command execution."""
