"""Domain services: birthday pipeline and notifiers."""
