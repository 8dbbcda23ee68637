"""
Service layer.

``ResourceService`` holds the CRUD semantics for one resource and
``ResourceServiceFactory`` resolves resource names to services.
"""
