"""HTTP API for the registration service."""
