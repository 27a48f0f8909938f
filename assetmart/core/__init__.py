"""Core marketplace machinery: registry, funds, listings, events, settlement."""
