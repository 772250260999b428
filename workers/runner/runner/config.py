"""Runner configuration settings."""

from pydantic_settings import BaseSettings


class ConfigurationError(Exception):
    """Raised when required settings are missing."""


class Settings(BaseSettings):
    """Runner configuration loaded from environment variables."""

    # Notion
    notion_token: str | None = None
    notion_page_id: str | None = None
    notion_api_url: str = "https://api.notion.com/v1"
    notion_version: str = "2022-06-28"

    # LLM Configuration
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str | None = None

    # Noji
    noji_bearer_token: str | None = None
    noji_api_url: str = "https://api-de.noji.io"
    noji_deck_id: str | None = None

    # Write cards to a TSV file instead of Noji
    tsv_output: str | None = None

    # State
    state_file: str = "lesson-state.json"
    strict_state: bool = False

    # Pipeline Configuration
    batch_label: str = "Lebanese Arabic Lessons"
    min_artifact_chars: int = 50
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def missing_required(self) -> list[str]:
        """Names of required variables that are unset."""
        required = {
            "NOTION_TOKEN": self.notion_token,
            "NOTION_PAGE_ID": self.notion_page_id,
            "OPENAI_API_KEY": self.openai_api_key,
        }
        if not self.tsv_output:
            required["NOJI_BEARER_TOKEN"] = self.noji_bearer_token
            required["NOJI_DECK_ID"] = self.noji_deck_id
        return [name for name, value in required.items() if not value]

    def validate_required(self) -> None:
        """Raise ConfigurationError listing every missing variable."""
        missing = self.missing_required()
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

