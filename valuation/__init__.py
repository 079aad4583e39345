"""
Listing valuation service: street/complex matching, fair price, liquidity.
"""

__version__ = "1.0.0"
