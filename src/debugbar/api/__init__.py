"""ASGI integration: entry point, middleware and the demo application."""
