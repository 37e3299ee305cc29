"""API routing and shared dependencies.

The root router lives in ``venuin.api.router``; it is not imported here so
that repositories can import ``venuin.api.dependencies`` without pulling in
every route module.
"""
