"""
Financing gateway application.

Lets customers pay for an order through a third-party consumer
financing provider:

- Eligibility: decides whether financing is offered for a cart/order
- Offers: requests a registration URL for the customer from the provider
- Callbacks: verifies provider notifications and updates order state

Note:
    Django models are NOT imported here to avoid AppRegistryNotReady
    errors. Import from financing.models, financing.gateway etc.
"""
