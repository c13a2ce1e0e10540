"""Domain layer shared across K-Notes packages."""
