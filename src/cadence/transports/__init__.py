from cadence.transports.http import HttpFetcher, HttpRequest

__all__ = ["HttpFetcher", "HttpRequest"]
