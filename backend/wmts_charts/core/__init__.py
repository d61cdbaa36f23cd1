"""Core settings and error types shared across the chart provider."""
