"""Version information for image-resizer-core"""

__version__ = "1.0.0"
