from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DICE_EXPR_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    server_name: str = "mcp-dice-expression"

    # Longer input is rejected before tokenizing. At 128 characters balanced
    # parentheses reach at most 63 levels, inside max_nesting_depth.
    max_input_length: int = 128

    # Deeper parentheses are a parse error, whatever the input length.
    max_nesting_depth: int = 64

    # Largest dice count a single roll may draw.
    max_dice: int = 10_000

    # Logs go to stderr; stdout carries the MCP stdio transport.
    log_level: str = "WARNING"


settings = Settings()
