"""Presentation layer: REST API y WebSocket."""
