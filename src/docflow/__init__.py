"""DocFlow - document management with admin-reviewed replace and remove permissions"""

__version__ = "0.1.0"
