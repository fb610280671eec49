"""
Client utilities: configuration store and logging.
"""
