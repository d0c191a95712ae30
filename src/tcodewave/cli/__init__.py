"""Command line interface for tcodewave."""
