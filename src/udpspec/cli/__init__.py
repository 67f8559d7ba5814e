"""Command-line interface for udpspec."""
