"""Command line tool for artifact-renamer."""
