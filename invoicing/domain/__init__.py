"""
Domain layer: entities, value objects, events, repository ports and services.
"""
