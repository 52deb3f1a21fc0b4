"""Command line entry points for the budget tracker."""
