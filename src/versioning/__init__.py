"""Platform umbrella version detection."""
