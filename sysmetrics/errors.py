"""
Exception classes for the sysmetrics agent.
"""


class SysmetricsError(Exception):
    """Base exception for all sysmetrics errors"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigError(SysmetricsError):
    """Invalid or unreadable configuration"""

    def __init__(self, message: str):
        super().__init__(f"Config Error: {message}")


class SamplingError(SysmetricsError):
    """A metric source returned unusable data"""

    def __init__(self, family: str, message: str):
        self.family = family
        super().__init__(f"{family}: {message}")
