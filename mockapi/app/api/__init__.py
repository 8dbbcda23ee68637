"""HTTP layer: routers and error translation."""
