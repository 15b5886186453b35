"""
FastAPI Event Calendar backend package.

The application instance lives in ``src.api.main`` (``src.api.main:app``);
it is not imported here so that importing the settings or stores does not
configure logging or build the app as a side effect.
"""
