"""Command-line entry point for the personal finance tracker."""
