"""Action dispatcher: performs exactly one terminal navigation."""

import re
from urllib.parse import quote, urljoin, urlsplit

from idleguard.config.settings import ActionSettings, PostTimeoutAction
from idleguard.errors import RedirectResolutionError
from idleguard.host.location import COMMUNITY_MARKERS, Location
from idleguard.host.navigation import Navigator
from idleguard.logger import get_logger

logger = get_logger()

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")
_LEADING_SLASHES_RE = re.compile(r"^/{2,}")
# A run of slashes after ":" belongs to an embedded URL, e.g. ?next=https://...
_DUPLICATE_SLASHES_RE = re.compile(r"(?<!:)/{2,}")

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def has_scheme(url: str) -> bool:
    return bool(_SCHEME_RE.match(url))


def normalize_redirect_url(url: str) -> str:
    """Give a redirect target a leading slash and collapse duplicate slashes.

    The ``scheme://`` separator of an absolute URL is preserved, and so is
    any ``://`` further along, such as a return URL in the query string.

    >>> normalize_redirect_url("//a//b/")
    '/a/b/'
    >>> normalize_redirect_url("dashboard")
    '/dashboard'
    >>> normalize_redirect_url("/login?next=https://other.example/x")
    '/login?next=https://other.example/x'
    """
    url = url.strip()
    match = _SCHEME_RE.match(url)
    if match:
        prefix, rest = match.group(0), url[match.end() :]
        return prefix + _DUPLICATE_SLASHES_RE.sub("/", rest)
    if not url.startswith("/"):
        url = "/" + url
    url = _LEADING_SLASHES_RE.sub("/", url)
    return _DUPLICATE_SLASHES_RE.sub("/", url)


class ActionDispatcher:
    """Resolves the terminal target and hands it to the navigator."""

    def __init__(self, location: Location, navigator: Navigator) -> None:
        self._location = location
        self._navigator = navigator

    def dispatch(self, settings: ActionSettings) -> str:
        """Perform the configured terminal action.

        Args:
            settings: Action settings; unknown actions behave as logout.

        Returns:
            The URL navigated to.
        """
        if settings.post_timeout_action == PostTimeoutAction.REDIRECT:
            url = self.redirect_target(settings.redirect_url)
            logger.info(f"Session ended, redirecting to {url}")
        else:
            url = self.logout_target(settings.logout_path)
            logger.info(f"Session ended, logging out via {url}")

        self._navigator.navigate(url)
        return url

    def logout_target(self, logout_path: str) -> str:
        """Logout endpoint whose return URL is the origin or community base."""
        base = self._location.community_base_url()
        path = normalize_redirect_url(logout_path or "/")
        return f"{base}{path}?retUrl={quote(base, safe=_URI_COMPONENT_SAFE)}"

    def redirect_target(self, redirect_url: str) -> str:
        """Resolve a configured redirect to an absolute URL.

        Falls back to the origin root when the target cannot be resolved.
        """
        try:
            return self._resolve(normalize_redirect_url(redirect_url or "/"))
        except (RedirectResolutionError, ValueError) as e:
            logger.warning(f"Cannot resolve redirect {redirect_url!r}: {e}; using origin root")
            return self._location.origin + "/"

    def _resolve(self, url: str) -> str:
        origin = self._location.origin
        if not urlsplit(origin).netloc:
            raise RedirectResolutionError(f"page location {self._location.href!r} has no host")

        # Explicit scheme: configured trust, honoured as given
        if has_scheme(url):
            if not urlsplit(url).netloc:
                raise RedirectResolutionError(f"absolute target {url!r} has no host")
            return url

        path = url
        prefix = self._location.community_path()
        if prefix:
            first_segment = url.split("/")[1]
            # Paths naming a community marker are already site-rooted
            if first_segment not in COMMUNITY_MARKERS and not url.startswith(prefix + "/"):
                path = normalize_redirect_url(prefix + url)

        resolved = urljoin(origin + "/", path)
        parts = urlsplit(resolved)
        if parts.netloc != self._location.host:
            # Relative target escaped the origin: keep only its path
            return origin + normalize_redirect_url(parts.path or "/")
        return resolved
