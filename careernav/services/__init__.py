"""Domain services for the course status engine."""
