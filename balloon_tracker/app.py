"""
Balloon Tracker Flask Application.

Main entry point for the web application. Initializes:
- Weather cache schema
- Feed client, aggregator and weather fetcher
- API routes
- Front-end serving with client-side routing fallback

Usage:
    python -m balloon_tracker.app

Or with gunicorn:
    gunicorn 'balloon_tracker.app:create_app()'
"""

import logging
import os
from typing import Optional

from flask import Flask, abort, send_from_directory
from flask_cors import CORS

from balloon_tracker.config import config
from balloon_tracker.models import init_db
from balloon_tracker.api import proxy_bp, balloons_bp
from balloon_tracker.feed import FlightDataAggregator, TreasureFeedClient
from balloon_tracker.weather import WeatherFetcher

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def create_app(
    feed_client: Optional[TreasureFeedClient] = None,
    aggregator: Optional[FlightDataAggregator] = None,
    weather_fetcher: Optional[WeatherFetcher] = None,
    static_dir: Optional[str] = None,
) -> Flask:
    """
    Application factory for Flask.

    Args:
        feed_client: Client used by the proxy and the default aggregator
        aggregator: Flight data aggregator (built from feed_client if None)
        weather_fetcher: Weather fetcher (built from config if None)
        static_dir: Front-end bundle directory (config.static_dir if None)

    Returns:
        Configured Flask application instance.
    """
    # Static files are served by the fallback route below
    app = Flask(__name__, static_folder=None)

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    # Initialize database
    logger.info('Initializing weather cache database...')
    init_db()

    if config.weather.enabled_flag and not config.weather.api_key:
        logger.warning('WEATHER_ENABLED is set but OPENWEATHER_API_KEY is missing, weather disabled')

    feed_client = feed_client or TreasureFeedClient.from_config()
    app.config['FEED_CLIENT'] = feed_client
    app.config['AGGREGATOR'] = aggregator or FlightDataAggregator(client=feed_client)
    app.config['WEATHER_FETCHER'] = weather_fetcher or WeatherFetcher()
    app.config['STATIC_DIR'] = static_dir or config.static_dir

    # Register API blueprints
    app.register_blueprint(proxy_bp)
    app.register_blueprint(balloons_bp)

    # -------------------------------------------------------------------------
    # Frontend routes
    # -------------------------------------------------------------------------

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    @app.route('/', defaults={'path': ''})
    @app.route('/<path:path>')
    def frontend(path: str):
        """Serve built assets, falling back to index.html for client routes."""
        if path == 'api' or path.startswith('api/'):
            abort(404)

        root = app.config['STATIC_DIR']
        if path and os.path.isfile(os.path.join(root, path)):
            return send_from_directory(root, path)
        return send_from_directory(root, 'index.html')

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()

    port = config.port

    logger.info(f'Starting Balloon Tracker on http://localhost:{port}')

    app.run(
        host='0.0.0.0',
        port=port,
        debug=config.debug,
        use_reloader=False,
    )


if __name__ == '__main__':
    run_development_server()
