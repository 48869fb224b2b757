"""Flask dashboard for fleet accounts."""
