from flask import Flask, Response

from ..core.dispatcher import ContentDispatcher
from ..core.models import DEFAULT_PAGE, ServedContent, ServerConfig
from ..utils.common import get_logger, quiet_logger



def to_response(served: ServedContent) -> Response:
    return Response(
        served.body,
        status=int(served.status),
        content_type=served.content_type,
    )



def create_app(dispatcher: ContentDispatcher, default_page=DEFAULT_PAGE) -> Flask:
    app = Flask(__name__)
    app.config["ZIPSERVE_DEFAULT_PAGE"] = default_page

    @app.get("/")
    def index():
        return to_response(dispatcher.dispatch(app.config["ZIPSERVE_DEFAULT_PAGE"]))

    # The default converter stops at "/", so only one segment gets here.
    @app.get("/<file>")
    def get_file(file):
        return to_response(dispatcher.dispatch(file))

    return app



def run_server(config: ServerConfig, dispatcher=None):
    logger = quiet_logger() if not config.verbose else get_logger()

    if dispatcher is None:
        dispatcher = ContentDispatcher(
            config.archive_file,
            reopen=config.reopen,
            verbose=config.verbose,
        )

    app = create_app(dispatcher, config.default_page)
    logger.info(f"Starting zipserve on port {config.port}.")

    with dispatcher:
        app.run(host=config.host, port=config.port, threaded=True)
