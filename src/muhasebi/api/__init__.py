"""HTTP API for risk trends and billing."""
