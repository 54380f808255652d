"""Metadata of the analysis in progress."""

from .errors import AlreadyInitializedError, NotInitializedError

_UNSET = object()


class AnalysisMetadataHolder:
    """Whether the current analysis is a pull request and what it compares against.

    Every value is set once, at the start of the job, and read afterwards.
    """

    def __init__(self) -> None:
        self._pull_request: object = _UNSET
        self._base_analysis: object = _UNSET

    def set_pull_request(self, pull_request: bool) -> None:
        if self._pull_request is not _UNSET:
            raise AlreadyInitializedError("Pull request flag is already set")
        self._pull_request = pull_request

    def set_base_analysis(self, analysis_uuid: str | None) -> None:
        """Set the UUID of the analysis to compare against, None for a first analysis."""
        if self._base_analysis is not _UNSET:
            raise AlreadyInitializedError("Base analysis is already set")
        self._base_analysis = analysis_uuid

    def is_pull_request(self) -> bool:
        if self._pull_request is _UNSET:
            raise NotInitializedError("Pull request flag has not been set")
        return bool(self._pull_request)

    def is_first_analysis(self) -> bool:
        return self.get_base_analysis() is None

    def get_base_analysis(self) -> str | None:
        if self._base_analysis is _UNSET:
            raise NotInitializedError("Base analysis has not been set")
        return self._base_analysis  # type: ignore[return-value]
