import sys

from .core.dispatcher import ContentDispatcher
from .core.models import DEFAULT_PAGE
from .web.app import create_app




class zipserve(ContentDispatcher):
    """Dispatcher bound to a default page, serving this program's own file unless told otherwise."""

    def __init__(self, archive_file=None, default_page=DEFAULT_PAGE, reopen=False, verbose=True):
        super().__init__(archive_file or sys.argv[0], reopen=reopen, verbose=verbose)
        self._default_page = default_page

    @property
    def default_page(self):
        return self._default_page

    def index(self):
        return self.dispatch(self._default_page)

    def create_app(self):
        return create_app(self, self._default_page)
