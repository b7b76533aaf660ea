"""Application services for the accounts domain."""
