"""HTTP API: application factory, dependencies, routes and metrics."""
