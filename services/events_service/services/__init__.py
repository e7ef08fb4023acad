"""Events Service business logic."""
