"""Step outputs for the surrounding workflow."""

import logging
import os
from collections.abc import Mapping

logger = logging.getLogger(__name__)


def set_output(name: str, value: str, environ: Mapping[str, str] | None = None) -> None:
    """Publish a step output.

    Appends ``name=value`` to the file named by ``GITHUB_OUTPUT``. Outside of
    GitHub Actions the pair is only logged.

    Raises:
        ValueError: If the name or value contains a line break
    """
    if any(ch in text for text in (name, value) for ch in "\r\n"):
        raise ValueError(f"Output {name!r} cannot contain line breaks")

    env = os.environ if environ is None else environ
    output_file = env.get("GITHUB_OUTPUT")
    if not output_file:
        logger.info(f"Output {name}={value}")
        return

    with open(output_file, "a") as f:
        f.write(f"{name}={value}\n")
    logger.debug(f"Wrote output {name} to {output_file}")
