"""HTTP read API over the dashboard views."""
