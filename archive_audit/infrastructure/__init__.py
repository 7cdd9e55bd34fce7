"""Infrastructure layer: adapters, stubs, console output and observability."""
