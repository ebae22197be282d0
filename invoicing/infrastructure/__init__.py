"""
Infrastructure layer: database, repositories, auth, events and web.
"""
