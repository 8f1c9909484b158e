"""SimulatorError hierarchy for library-level failures."""

from __future__ import annotations


class SimulatorError(Exception):
    """Base for all simulator exceptions."""


class ContextStateError(SimulatorError):
    """A RequestContext was mutated outside its lifecycle rules."""

    def __init__(self, detail: str, *, field: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.field = field


class ConfigurationError(SimulatorError):
    """An environment setting could not be parsed."""

    def __init__(self, detail: str, *, variable: str) -> None:
        super().__init__(detail)
        self.detail = detail
        self.variable = variable
