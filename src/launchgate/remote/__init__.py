"""Remote configuration retrieval and parsing."""

from launchgate.remote.fetch import (
    FetchError,
    Fetcher,
    FileFetcher,
    HttpFetcher,
    StaticFetcher,
    fetcher_for_url,
)
from launchgate.remote.parser import JsonConfigParser, ParseError, Parser

__all__ = [
    "FetchError",
    "Fetcher",
    "FileFetcher",
    "HttpFetcher",
    "StaticFetcher",
    "fetcher_for_url",
    "JsonConfigParser",
    "ParseError",
    "Parser",
]
