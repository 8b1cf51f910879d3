"""Data models for izanami-cli."""
