"""
AdventureWorks BI
Analytical metric queries over the AdventureWorks retail snapshot
"""

__version__ = "0.1.0"
