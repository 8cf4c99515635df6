"""Command line interface for the RideFlow application."""
