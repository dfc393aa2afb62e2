class GenerationError(Exception):
    """Raised when a maze cannot be produced for the given inputs."""


class ExhaustedRetries(GenerationError):
    def __init__(self, attempts: int):
        super().__init__(f"main path not placed after {attempts} attempts")
        self.attempts = attempts
