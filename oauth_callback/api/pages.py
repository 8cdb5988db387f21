"""HTML pages rendered to the browser during the authorization flow."""

from __future__ import annotations

from html import escape

_START_STYLE = """
      body { font-family: system-ui, -apple-system, sans-serif; max-width: 800px; margin: 50px auto; padding: 20px; }
      h1 { color: #333; }
      .auth-link { display: inline-block; padding: 12px 24px; background: #4285f4; color: white; text-decoration: none; border-radius: 6px; margin: 20px 0; }
      .auth-link:hover { background: #357abd; }
      pre { background: #f5f5f5; padding: 15px; border-radius: 6px; overflow-x: auto; white-space: pre-wrap; word-break: break-all; }
      .note { background: #fff3cd; padding: 15px; border-radius: 6px; margin: 20px 0; }
"""


def render_start_page(authorization_url: str) -> str:
    """Setup page offering the consent URL as a button and as copyable text."""
    url = escape(authorization_url)
    return f"""<!DOCTYPE html>
<html>
  <head>
    <title>OAuth Setup</title>
    <style>{_START_STYLE}</style>
  </head>
  <body>
    <h1>Google OAuth Authorization</h1>
    <p>Click the button below to authorize with your Google account:</p>
    <a href="{url}" class="auth-link">Authorize with Google</a>

    <div class="note">
      <strong>Note:</strong> After authorization, you will be redirected back to this server.
      The OAuth token will be captured and stored automatically.
    </div>

    <h2>Manual Authorization</h2>
    <p>If the button doesn't work, copy this URL and open it in your browser:</p>
    <pre>{url}</pre>
  </body>
</html>
"""


def render_success_page(email: str) -> str:
    return f"""<!DOCTYPE html>
<html>
  <head>
    <title>Authorization Successful</title>
    <style>
      body {{ font-family: system-ui, -apple-system, sans-serif; text-align: center; padding-top: 50px; }}
      .success {{ color: #28a745; }}
    </style>
  </head>
  <body>
    <h1 class="success">Authorization Successful</h1>
    <p>Account: <strong>{escape(email)}</strong></p>
    <p>You can close this window and start using the API.</p>
  </body>
</html>
"""


def render_failure_page(message: str, retry_path: str = "/auth/start") -> str:
    """Page for a failed exchange or write, with a link to start over."""
    return f"""<!DOCTYPE html>
<html>
  <body style="font-family: sans-serif; text-align: center; padding-top: 50px;">
    <h1 style="color: #dc3545;">Authorization Failed</h1>
    <p>Error: {escape(message)}</p>
    <p><a href="{escape(retry_path)}">Try Again</a></p>
  </body>
</html>
"""


def render_provider_error_page(error: str) -> str:
    return f"""<!DOCTYPE html>
<html>
  <body>
    <h1>Login Failed</h1>
    <p>Error: {escape(error)}</p>
  </body>
</html>
"""


__all__ = [
    "render_failure_page",
    "render_provider_error_page",
    "render_start_page",
    "render_success_page",
]
