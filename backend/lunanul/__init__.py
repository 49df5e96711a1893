"""Lunanul subscription entitlement and usage-gating engine."""
