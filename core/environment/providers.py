from dishka import Provider, Scope, provide
from core.environment.config import Settings


class EnvironmentProvider(Provider):
    """
    Provider for environment configuration.

    Parameters
    ----------
    settings : Settings | None
        Ready settings to serve instead of reading the environment
    """

    component = "environment"
    scope = Scope.APP

    def __init__(self, settings: Settings | None = None):
        super().__init__()
        self._settings = settings

    @provide
    def get_environment(self) -> Settings:
        return self._settings or Settings()
