"""Command line interface for livetex."""
