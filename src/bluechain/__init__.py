"""
Bluechain Supply Registry - SupplyItem records over a key-value ledger.

The registry creates, updates and enumerates SupplyItem records on top of
two ledger primitives (get/put), keeping a secondary index of every record
ID so that enumeration works on a store that only offers point lookups.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
