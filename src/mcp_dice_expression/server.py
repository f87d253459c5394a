from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from .config import settings
from .dice import DiceError, roll_from_text


logger = logging.getLogger(__name__)

mcp = FastMCP(settings.server_name)


@mcp.tool()
def roll_dice(text: str):
    """Evaluate a dice expression such as '2d6+3', '(1d4)d%' or '3*(1d8+2)'.

    Operators, loosest to tightest: + and -, * and / (integer division),
    d (roll). A '%' inside a number multiplies it by 100 ('5%' is 500), and a
    leading '%' starts the number at 1 ('%5' is 15).

    Input: text (string)
    Output: structured JSON with the individual rolls, total and explanation

    Raises a hard error (exception) on invalid input.
    """

    logger.info("roll_dice request: %r", text)
    try:
        return roll_from_text(text)
    except DiceError as e:
        logger.warning("rejected %r: %s", text, e)
        # Fail-fast: surface stable error codes in the message.
        raise ValueError(str(e)) from None


def run() -> None:
    logging.basicConfig(level=settings.log_level.upper())
    # Default transport is stdio.
    mcp.run()


if __name__ == "__main__":
    run()
