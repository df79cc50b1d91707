"""Infrastructure Layer — logging, database and the reference node.

Invariants:
    - Infrastructure failures surface as NodeError subclasses

Design Decisions:
    - The reference node lives here, behind the NodeAPI Protocol: the gateway
      never imports it
"""
