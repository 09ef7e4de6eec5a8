"""
ecom-orcha: compose dispatcher for the e-commerce deployment.
"""

__version__ = "1.0.0"
