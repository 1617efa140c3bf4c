"""HTTP primitives — immutable request and response types for the server pipeline."""
