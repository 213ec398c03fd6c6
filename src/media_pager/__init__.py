"""Media Pager - client-side sorting pager for remote media catalogs."""

from .pagers.client_sort import ClientSortPager
from .pagers.sequential import PagerConfig, SequentialPager

__all__ = ["ClientSortPager", "PagerConfig", "SequentialPager"]

__version__ = "0.1.0"
