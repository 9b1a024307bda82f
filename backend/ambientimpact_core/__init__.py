"""
Ambient.Impact Core
Component registry for reusable front-end components: asset libraries,
cached HTML fragments and client-side settings.
"""

__version__ = "0.1.0"
