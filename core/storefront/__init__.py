"""
Storefront Workflows
====================
Catalog, cart, checkout, order, review and profile operations. Every call
takes the acting CallerContext and goes through the access gateway.
"""
