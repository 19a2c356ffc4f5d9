"""Core configuration for Linkboard."""
