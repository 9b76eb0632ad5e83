"""HTTP interface for the personal finance tracker."""
