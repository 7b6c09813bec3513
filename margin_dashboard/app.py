"""
Flask application for the margin dashboard.

The dashboard shows per-city rosters of people and their margins, accepts
Excel uploads for a city, exports a city's roster back to Excel and manages
the list of cities.  Every piece of data lives in the external webhook
service; this module only renders pages and forwards requests through
``WebhookGateway``.

The gateway and the single-flight guard are attached to the application in
``init_app`` and looked up per request, and the login flag lives in the
signed Flask session, so nothing is shared through module globals.
"""

import io
import logging
from functools import wraps

import requests
from flask import (
    Flask,
    current_app,
    flash,
    jsonify,
    redirect,
    render_template_string,
    request,
    send_file,
    session,
    url_for,
)
from werkzeug.exceptions import RequestEntityTooLarge

from .config import configure_logging, ensure_secret_key, load_settings
from .errors import GatewayError, InvalidFileFormat, ResourceBusy
from .gateway import WebhookGateway
from .guard import CITIES_KEY, SingleFlight, table_key
from .pages import DASHBOARD_PAGE, LOGIN_PAGE
from .roster import (
    XLSX_MIMETYPE,
    export_city_workbook,
    export_filename,
    format_margin,
    parse_people_workbook,
    tag_with_city,
)

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Flask application setup
# -----------------------------------------------------------------------------

app = Flask(__name__)
app.config.update(load_settings())
configure_logging(app.config["LOG_LEVEL"])


class DashboardContext:
    """Per-application collaborators shared by the request handlers."""

    def __init__(self, gateway, guard):
        self.gateway = gateway
        self.guard = guard


def init_app(flask_app, overrides=None):
    """
    Attach a fresh gateway and guard to ``flask_app``.

    :param flask_app: The Flask application.
    :param overrides: Optional config values applied first.  ``WEBHOOK_SESSION``
        replaces the ``requests.Session`` used by the gateway.
    :return: The same application.
    """
    if overrides:
        flask_app.config.update(overrides)
    ensure_secret_key(flask_app.config)
    gateway = WebhookGateway(
        base_url=flask_app.config["WEBHOOK_BASE_URL"],
        timeout=flask_app.config["WEBHOOK_TIMEOUT"],
        session=flask_app.config.get("WEBHOOK_SESSION"),
    )
    flask_app.extensions["margin_dashboard"] = DashboardContext(gateway, SingleFlight())
    return flask_app


def dashboard_context():
    """Gateway and guard of the current application."""
    return current_app.extensions["margin_dashboard"]


@app.template_filter("margin")
def margin_filter(value):
    """Jinja filter: margin as ``0.00`` or N/A."""
    return format_margin(value)


def login_required(f):
    """Redirect to the login page unless the session is authenticated."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not session.get("authenticated"):
            return redirect(url_for("login"))
        return f(*args, **kwargs)
    return decorated_function


def start_session(username):
    """Start a fresh authenticated session."""
    session.clear()
    session["authenticated"] = True
    session["username"] = username


def send_workbook(content, city):
    """Return the workbook as an attachment named after the city."""
    filename = export_filename(city)
    response = send_file(
        io.BytesIO(content),
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=filename,
    )
    try:
        filename.encode("latin-1")
    except UnicodeEncodeError:
        # Header values are Latin-1; Werkzeug already emitted the RFC 5987 form
        return response
    response.headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    response.headers["X-Filename"] = filename
    return response


@app.errorhandler(RequestEntityTooLarge)
def handle_too_large(exc):
    """Oversized request body: JSON under /api/, otherwise a flashed error."""
    message = "The uploaded file is too large"
    if request.path.startswith("/api/"):
        return jsonify({"error": message}), 413
    flash(message, "error")
    return redirect(url_for("index"))


# -----------------------------------------------------------------------------
# Login
# -----------------------------------------------------------------------------

@app.route("/login", methods=["GET", "POST"])
def login():
    """Login form; sets the session flag when the webhook authenticates."""
    if request.method == "POST":
        username = (request.form.get("username") or "").strip()
        password = request.form.get("password") or ""
        try:
            data = dashboard_context().gateway.login(username, password)
        except (GatewayError, requests.RequestException, ValueError) as exc:
            logger.warning("Login error: %s", exc)
            flash("Login failed", "error")
        else:
            if isinstance(data, dict) and data.get("authenticated"):
                start_session(username)
                logger.info("User %s logged in", username)
                return redirect(url_for("index"))
            flash("Invalid username or password", "error")
    elif session.get("authenticated"):
        return redirect(url_for("index"))
    return render_template_string(LOGIN_PAGE)


@app.route("/logout")
def logout():
    """Clear the session and go back to the login page."""
    session.clear()
    return redirect(url_for("login"))


# -----------------------------------------------------------------------------
# Dashboard
# -----------------------------------------------------------------------------

@app.route("/")
@login_required
def index():
    """Dashboard with one card per city."""
    ctx = dashboard_context()
    city_data, cities, error = {}, [], None
    try:
        city_data = ctx.gateway.fetch_roster()
        cities = ctx.gateway.city_names()
    except (GatewayError, requests.RequestException) as exc:
        logger.warning("Failed to load dashboard data: %s", exc)
        city_data, cities = {}, []
        error = "Failed to fetch data. Please try again later."
        flash("Failed to fetch data", "error")
    return render_template_string(DASHBOARD_PAGE, city_data=city_data, cities=cities, error=error)


@app.route("/upload", methods=["POST"])
@login_required
def upload():
    """Upload a Name/CPF workbook for a city."""
    file = request.files.get("file")
    city = (request.form.get("city") or "").strip()
    if file is None or file.filename == "" or not city:
        flash("Please select a file and a city", "error")
        return redirect(url_for("index"))

    ctx = dashboard_context()
    try:
        with ctx.guard.hold(table_key(city), city):
            # The whole file is validated before anything is sent
            people = tag_with_city(parse_people_workbook(file.read()), city)
            ctx.gateway.upload_people(people)
    except (InvalidFileFormat, GatewayError, ResourceBusy) as exc:
        logger.warning("Upload for %s rejected: %s", city, exc)
        flash(str(exc), "error")
    except requests.RequestException as exc:
        logger.warning("Upload for %s failed: %s", city, exc)
        flash("An error occurred while uploading the data", "error")
    else:
        logger.info("Uploaded %d people for %s", len(people), city)
        flash("Data uploaded successfully", "success")
    return redirect(url_for("index"))


@app.route("/cities/<path:city>/download")
@login_required
def download_city(city):
    """Download the current roster of one city."""
    try:
        people = dashboard_context().gateway.fetch_roster().get(city, [])
        content = export_city_workbook(city, people)
    except (GatewayError, requests.RequestException) as exc:
        logger.warning("Download for %s failed: %s", city, exc)
        flash("Failed to download the table", "error")
        return redirect(url_for("index"))
    return send_workbook(content, city)


@app.route("/cities/<path:city>/clear", methods=["POST"])
@login_required
def clear_city(city):
    """Remove every person of one city."""
    ctx = dashboard_context()
    try:
        with ctx.guard.hold(table_key(city), city):
            ctx.gateway.clear_city_table(city)
    except ResourceBusy as exc:
        flash(str(exc), "error")
    except (GatewayError, requests.RequestException) as exc:
        logger.warning("Clearing %s failed: %s", city, exc)
        flash("Failed to clear the table", "error")
    else:
        flash(f"Table for {city} has been cleared", "success")
    return redirect(url_for("index"))


# -----------------------------------------------------------------------------
# City management
# -----------------------------------------------------------------------------

@app.route("/cities", methods=["POST"])
@login_required
def add_city():
    """Add a city to the city list."""
    city = (request.form.get("city") or "").strip()
    if not city:
        flash("City name cannot be empty", "error")
        return redirect(url_for("index"))

    ctx = dashboard_context()
    try:
        with ctx.guard.hold(CITIES_KEY, "the city list"):
            ctx.gateway.add_city(city)
    except ResourceBusy as exc:
        flash(str(exc), "error")
    except (GatewayError, requests.RequestException) as exc:
        logger.warning("Adding %s failed: %s", city, exc)
        flash("Failed to add city", "error")
    else:
        flash(f"{city} has been added", "success")
    return redirect(url_for("index"))


@app.route("/cities/<path:city>/delete", methods=["POST"])
@login_required
def delete_city(city):
    """Remove a city from the city list."""
    ctx = dashboard_context()
    try:
        with ctx.guard.hold(CITIES_KEY, "the city list"):
            ctx.gateway.delete_city(city)
    except ResourceBusy as exc:
        flash(str(exc), "error")
    except (GatewayError, requests.RequestException) as exc:
        logger.warning("Deleting %s failed: %s", city, exc)
        flash("Failed to delete city", "error")
    else:
        flash(f"{city} has been deleted", "success")
    return redirect(url_for("index"))


# -----------------------------------------------------------------------------
# JSON API
# -----------------------------------------------------------------------------

@app.route("/api/login", methods=["POST"])
def api_login():
    """JSON login, proxied to the webhook."""
    body = request.get_json(silent=True) or {}
    username = body.get("username")
    try:
        data = dashboard_context().gateway.login(username, body.get("password"))
    except (GatewayError, requests.RequestException, ValueError) as exc:
        logger.warning("Login error: %s", exc)
        return jsonify({"authenticated": False, "error": "Login failed"}), 401
    if isinstance(data, dict) and data.get("authenticated"):
        start_session(username)
    return jsonify(data)


@app.route("/api/download-table", methods=["POST"])
def api_download_table():
    """Build a workbook from posted ``{city, people}`` JSON."""
    try:
        body = request.get_json(force=True)
        city = body["city"]
        content = export_city_workbook(city, body["people"])
        return send_workbook(content, city)
    except Exception:
        # Keep errors as JSON; Vercel will otherwise wrap exceptions in an HTML page.
        logger.exception("Error generating Excel file")
        return jsonify({"error": "Failed to generate Excel file"}), 500


@app.route("/health")
def health():
    """Liveness check."""
    return jsonify({"status": "ok"})


init_app(app)
