"""
Built-in component plug-ins
"""
