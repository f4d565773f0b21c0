"""HTTP API over the signal pipeline."""
