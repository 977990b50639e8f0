"""HTTP-facing helpers shared by the route modules."""
