"""Error types shared by the prompt, generation and notification layers"""


class SignalistError(Exception):
    """Base class for all application errors"""


class ValidationError(SignalistError):
    """Malformed input to rendering or generation"""


class MissingPlaceholderError(ValidationError):
    """A prompt template placeholder has no matching context entry"""

    def __init__(self, template_name: str, missing: list[str]):
        self.template_name = template_name
        self.missing = sorted(missing)
        super().__init__(
            f"Template '{template_name}' is missing context for: {', '.join(self.missing)}"
        )


class ExternalServiceError(SignalistError):
    """An external provider (auth, event bus, generation, email, news) failed"""


class GenerationUnavailableError(ExternalServiceError):
    """The generative text service could not be reached or returned an error"""


class MalformedResponseError(SignalistError):
    """Generated output failed schema or format checks"""
