"""
Invoices module.

Scope:
- Paginated, searchable invoice table
- Create / edit / delete via form actions (validate, persist, revalidate, redirect)
- Dashboard aggregates: card totals and latest invoices

Amounts are integer cents in the database; dollars only at the form and display edges.
"""
