"""Service layer for Linkboard."""
