"""NydArt notification service.

The package is split the usual way: ``domain`` holds entities and the status
state machine, ``infrastructure`` the SQLAlchemy models and repositories,
``application`` the use cases and ``interfaces`` the HTTP layer.
"""
