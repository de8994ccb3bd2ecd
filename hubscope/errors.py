class ScopeDestroyedError(RuntimeError):
    """Raised when a destroyed scope is asked to publish, listen or subscribe."""

    def __init__(self, scope) -> None:
        super().__init__(f"scope {scope!r} has already been destroyed")
        self.scope = scope
