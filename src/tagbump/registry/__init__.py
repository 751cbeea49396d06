"""Registry access for container images."""
