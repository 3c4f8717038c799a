# wsgi.py - production entry point, e.g. `gunicorn wsgi:app`
from werkzeug.middleware.proxy_fix import ProxyFix
from taskcoach import create_app

app = create_app()
if app.config.get("BEHIND_PROXY"):
    # one hop of X-Forwarded-* so the secure session cookie survives TLS termination
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_for=1, x_host=1)
