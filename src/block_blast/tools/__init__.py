"""Command-line tools for authoring custom block sets."""
