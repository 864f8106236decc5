"""Custom exception hierarchy for Quolar.

Exception Hierarchy:
    QuolarError (base)
    ├── ConfigurationError
    ├── ProviderError
    │   └── ProviderLoadError
    └── WorkflowExecutionError
        └── ContextStateError

Step failures inside a workflow run are not raised to callers. They are
recorded as ``WorkflowError`` records on the workflow context (see
``quolar.engine.context``); the exceptions here cover configuration,
provider wiring and misuse of the engine itself.

Example Usage:
    >>> from quolar.exceptions import ConfigurationError
    >>> try:
    ...     load_config(path)
    ... except FileNotFoundError as e:
    ...     raise ConfigurationError(f"Config file not found: {path}") from e
"""


class QuolarError(Exception):
    """Base exception for all Quolar errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(QuolarError):
    """Configuration-related errors.

    Examples:
        - Configuration file not found
        - Invalid YAML/JSON syntax
        - Missing required configuration fields
        - ``custom`` provider without an ``adapter`` path
    """

    pass


class ProviderError(QuolarError):
    """Errors raised while wiring capability providers.

    Attributes:
        message: Human-readable error description
        kind: Capability kind (``tickets``, ``documentation``, ...)
        provider: Configured provider name
    """

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        provider: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            kind: Capability kind the provider was meant to fill
            provider: Provider name from configuration
        """
        self.kind = kind
        self.provider = provider

        parts = [message]
        if kind:
            parts.append(f"kind: {kind}")
        if provider:
            parts.append(f"provider: {provider}")

        full_message = message if len(parts) == 1 else f"{message} ({', '.join(parts[1:])})"
        super().__init__(full_message)
        # Preserve original message
        self.message = message


class ProviderLoadError(ProviderError):
    """An adapter class could not be resolved, imported or instantiated.

    Attributes:
        suggestion: Optional hint for fixing the configuration
    """

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        provider: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            kind: Capability kind the provider was meant to fill
            provider: Provider name from configuration
            suggestion: Optional suggestion for resolution
        """
        self.suggestion = suggestion
        super().__init__(message, kind=kind, provider=provider)
        if suggestion:
            self.args = (f"{self.args[0]}\nSuggestion: {suggestion}",)


class WorkflowExecutionError(QuolarError):
    """Errors caused by misuse of the workflow engine.

    Collaborator failures never surface as this exception; they are
    converted into step outcomes by the step runner.
    """

    pass


class ContextStateError(WorkflowExecutionError):
    """A workflow context field was read before being set, or set twice.

    Attributes:
        field_name: The context field involved
    """

    def __init__(self, message: str, field_name: str | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message
            field_name: The context field involved
        """
        self.field_name = field_name
        super().__init__(message)
