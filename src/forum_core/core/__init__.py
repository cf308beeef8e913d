"""Configuration, security primitives and cross-cutting concerns."""
