"""
Host storefront orders.

Minimal order records consumed by payment gateways: billing data, line
items, totals, status with notes, and a key/value metadata store.
"""
