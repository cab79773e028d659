"""
Service layer abstraction.

Each service encapsulates one concern: discovering bindings,
rendering the listing, or translating ``VCAP_SERVICES`` into a
binding root.  API handlers and the command line only call into
this layer.
"""
