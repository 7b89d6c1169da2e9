"""
Infrastructure layer: HTTP clients, configuration and logging.
"""
