"""
Server - Bottle web front end over the aggregator.

Routes:
    /                  all periods
    /CW_<n>            one period
    /<creator>         one creator's entries across periods
    /<prefix>/<path>   media files from the base directory
    /static/<path>     static assets
"""

import logging
import os
from mimetypes import guess_type

import bottle
from bottle import Bottle, abort, static_file, template

from .aggregator import Aggregator
from .config import GalleryConfig
from .errors import FilesystemError, NotFoundError
from .slots import slot_positions
from .thumbnail_cache import ThumbnailCache

VIEWS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'views')
if VIEWS_DIR not in bottle.TEMPLATE_PATH:
    bottle.TEMPLATE_PATH.insert(0, VIEWS_DIR)

logger = logging.getLogger(__name__)


def log(msg):
    logger.debug(msg)


def numvotes(entries):
    """Rank positions to offer on the ballot form for a list of entries."""
    return list(slot_positions(len(entries)))


def add(a, b):
    return a + b


TEMPLATE_HELPERS = {'numvotes': numvotes, 'add': add}


def configure_logging(config: GalleryConfig) -> None:
    """Configure root logging from the gallery config."""
    level = logging.getLevelName(config.log_level.upper())
    if config.log_file:
        logging.basicConfig(filename=config.log_file, level=level,
                            format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')
    else:
        logging.basicConfig(level=level,
                            format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')


def create_app(config: GalleryConfig, aggregator: Aggregator = None) -> Bottle:
    """
    Build the Bottle application.

    Args:
        config: Gallery configuration
        aggregator: Aggregator to serve (default: one over config.base_dir
            with a fresh thumbnail cache)

    Returns:
        Configured Bottle application
    """
    app = Bottle()
    if aggregator is None:
        aggregator = Aggregator(
            config.base_dir,
            cache=ThumbnailCache(),
            link_prefix=config.link_prefix,
        )
    app.config['mmgallery.aggregator'] = aggregator

    def render(name, **kwargs):
        kwargs.update(TEMPLATE_HELPERS)
        return template(name, **kwargs)

    @app.route('/favicon.ico')
    def favicon():
        return static_file('favicon.ico', root=config.static_dir)

    @app.route('/static/<path:path>')
    def static(path):
        mime, _ = guess_type(path)
        return static_file(path, root=config.static_dir, mimetype=mime or 'auto')

    @app.route(f'/{config.link_prefix}/<path:path>')
    def media(path):
        return static_file(path, root=config.base_dir)

    @app.route('/')
    def index():
        log("Hit root")
        try:
            periods = aggregator.aggregate_all()
        except FilesystemError as e:
            logger.error(f"Aggregation failed: {e}")
            abort(500, "500 - server error")
        return render('index', weeks=periods, user=None)

    @app.route('/CW_<week:re:[0-9]+>')
    def week(week):
        try:
            period = aggregator.aggregate_one(week)
        except NotFoundError:
            abort(404, "404 - nothing here, look somewhere else")
        except FilesystemError as e:
            logger.error(f"Aggregation of CW_{week} failed: {e}")
            abort(500, "500 - server error")
        return render('week', week=period)

    @app.route('/<user:re:[a-z]+>')
    def user_content(user):
        try:
            periods = aggregator.aggregate_by_creator(user)
        except NotFoundError:
            abort(404, "404 page not found")
        except FilesystemError as e:
            logger.error(f"Aggregation for {user} failed: {e}")
            abort(500, "500 - server error")
        return render('user', weeks=periods, user=user)

    return app


app = application = create_app(GalleryConfig.from_env())


def run_server(config: GalleryConfig) -> None:
    """Configure logging and serve the gallery until interrupted."""
    configure_logging(config)
    log("Starting up....")
    gallery_app = create_app(config)
    log("running server...")
    bottle.run(
        app=gallery_app,
        host=config.host,
        port=config.port,
        server=config.server,
        debug=config.debug,
        reloader=config.debug,
    )
    log("Exiting.")
