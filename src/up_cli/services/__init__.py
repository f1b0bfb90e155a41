"""Service layer for up-cli."""
