"""CareerNav course/session status engine."""
