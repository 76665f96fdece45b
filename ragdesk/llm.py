"""OpenAI chat model wrapper."""

from openai import OpenAI

from .config import config
from .exceptions import LanguageModelError

logger = config.get_logger(__name__)


class ChatModel:
    """Sends one system instruction and one user message, returns the reply."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Create the OpenAI client.

        Args:
            api_key: OpenAI API key. If None, reads from OPENAI_API_KEY.
            model: Chat model name. If None, uses config.CHAT_MODEL.
            timeout: Seconds allowed per request. If None, uses
                config.BACKEND_TIMEOUT.
        """
        default_headers = config.get_api_headers()
        self.client = OpenAI(
            api_key=api_key or config.get_openai_api_key(),
            base_url=config.OPENAI_BASE_URL,
            default_headers=default_headers or None,
            timeout=config.BACKEND_TIMEOUT if timeout is None else timeout,
        )
        self.model = model or config.CHAT_MODEL

    def complete(self, system_prompt: str, user_content: str) -> str:
        """Run a single chat completion.

        Returns:
            The stripped text of the first choice.

        Raises:
            LanguageModelError: If the response has no choices or no content.
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            max_tokens=config.CHAT_MAX_TOKENS,
            temperature=config.CHAT_TEMPERATURE,
        )

        if not response.choices:
            msg = "Language model returned no choices"
            raise LanguageModelError(msg, {"model": self.model})

        content = response.choices[0].message.content
        if content is None:
            msg = "Language model returned an empty message"
            raise LanguageModelError(msg, {"model": self.model})

        return content.strip()
