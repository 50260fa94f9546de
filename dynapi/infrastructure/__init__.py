"""Infrastructure layer: logging configuration and request context"""
