"""Platform-specific utilities."""
