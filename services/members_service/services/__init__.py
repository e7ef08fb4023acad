"""Members Service business logic."""
