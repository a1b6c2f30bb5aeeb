from app.config import get_settings
from app.storer.context import Context


def get_context() -> Context:
    """
    Per-request storer context, bounded by STORER_TIMEOUT_SECONDS when set.
    """
    return Context.with_timeout(get_settings().STORER_TIMEOUT_SECONDS)
