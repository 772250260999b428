"""Command-line runner for the notion2noji pipeline."""
