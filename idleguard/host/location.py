"""Current page location and community-context detection."""

from dataclasses import dataclass
from urllib.parse import urlsplit

# Path segments marking a guest/community site
COMMUNITY_MARKERS = ("s", "sfsites")


@dataclass(frozen=True)
class Location:
    """Parsed URL of the page the guard is attached to."""

    href: str

    @property
    def scheme(self) -> str:
        return urlsplit(self.href).scheme

    @property
    def host(self) -> str:
        """Host including any explicit port."""
        return urlsplit(self.href).netloc

    @property
    def origin(self) -> str:
        parts = urlsplit(self.href)
        return f"{parts.scheme}://{parts.netloc}"

    @property
    def pathname(self) -> str:
        return urlsplit(self.href).path or "/"

    def is_community_site(self) -> bool:
        """Whether the page lives under a community path such as ``/s/``."""
        path = self.pathname
        return any(f"/{marker}/" in path for marker in COMMUNITY_MARKERS)

    def community_path(self) -> str:
        """Community prefix of the path, or "" outside a community site.

        The prefix runs up to and including the segment after the marker, so
        ``/help/s/article/42`` gives ``/help/s/article``.
        """
        if self.is_community_site():
            parts = self.pathname.split("/")
            for index, part in enumerate(parts):
                if part in COMMUNITY_MARKERS:
                    return "/".join(parts[: index + 2])
        return ""

    def community_base_url(self) -> str:
        """Origin plus the community prefix, or just the origin elsewhere."""
        return self.origin + self.community_path()
