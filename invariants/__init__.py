"""Invariant checks for sort runs and their operation traces."""
