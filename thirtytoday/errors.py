class MalformedResponseError(ValueError):
    """An upstream answered successfully but with a payload we cannot read."""


class UpstreamUnavailableError(RuntimeError):
    """No upstream call produced an HTTP response during a run."""
