"""
Service Layer - business rules on top of the repositories

Every service is a class taking its collaborators in the constructor and
a module level `get_<name>_service()` returning the shared instance.
"""
