"""Domain packages: entitlements, usage and gating."""
