"""
Customers module (read-only): picker list and the searchable customers table with invoice totals.
"""
