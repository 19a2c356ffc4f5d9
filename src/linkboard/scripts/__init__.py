"""Operator scripts for Linkboard."""
