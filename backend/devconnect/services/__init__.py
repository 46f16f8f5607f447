"""Services Layer — imperative shell around the pure core.

Invariants:
    - Services receive their collaborators (repositories, gateways) via constructor
    - Services raise DevConnectError subclasses; HTTP mapping happens in api/
"""
