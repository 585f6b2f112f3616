"""Password hashing and bearer token helpers."""
