"""OAuth callback listener.

Serves a setup page linking to the Google consent screen, receives the
provider redirect, exchanges the authorization code and stores the resulting
credential for the proxy service to use.
"""
