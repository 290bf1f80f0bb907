"""Identity provider integrations."""
