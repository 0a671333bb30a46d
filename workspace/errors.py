class WorkspaceError(Exception):
    pass


class ValidationError(WorkspaceError):
    """Input rejected before any state change (add-card fields, paths, icon uploads)."""


class CollaboratorFailure(WorkspaceError):
    """An outbound open/launch/path call failed. ``reason`` is shown to the user as-is."""

    def __init__(self, reason):
        super().__init__(reason)
        self.reason = str(reason)

    def __str__(self):
        return self.reason


class LocalPathNotConfigured(CollaboratorFailure):
    def __init__(self, target, reason=None):
        super().__init__(reason or f"未配置 {target} 的启动路径")
        self.target = target


class PersistenceParseFailure(WorkspaceError):
    pass
