"""Exception hierarchy shared across gcpeasy modules"""


class GcpeasyError(Exception):
    """Base exception for every failure gcpeasy reports to the user"""
    pass


class SelectionCancelled(GcpeasyError):
    """Raised when the user quits an interactive menu"""

    def __init__(self, message: str = "cancelled by user"):
        super().__init__(message)


class InvalidSelection(GcpeasyError):
    """Raised when menu input is not a listed number"""

    def __init__(self, answer: str):
        self.answer = answer
        super().__init__(f"invalid selection: {answer}")


class NoClustersError(GcpeasyError):
    """Raised when the current project has no GKE clusters"""

    def __init__(self, message: str = "no clusters found"):
        super().__init__(message)


class NoPodsError(GcpeasyError):
    """Raised when no application pods are running"""

    def __init__(self, message: str = "no pods found"):
        super().__init__(message)
