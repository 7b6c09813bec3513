"""
Vercel entry point for the margin dashboard.

Vercel's @vercel/python runtime serves any WSGI application bound to a
top-level variable called ``app`` in a file under ``api/``.  The dashboard
itself lives in the ``margin_dashboard`` package; this module only exposes
it, and runs the development server when executed directly.
"""

import os

from margin_dashboard.app import app

# Bind the app instance for Vercel.
app = app


if __name__ == "__main__":
    app.run(debug=bool(os.environ.get("FLASK_DEBUG")), port=int(os.environ.get("PORT") or 5000))
