"""SSO admin backend."""
