"""Command-line entry points for listblend."""
