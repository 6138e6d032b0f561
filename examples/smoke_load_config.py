from __future__ import annotations

import asyncio
import logging

from buildconf import BuildConfigLoader, LoadConfigInit, Platform
from buildconf.logging import LoggingSettings, init_logging


async def main() -> None:
    init_logging(LoggingSettings(level="debug"))
    logger = logging.getLogger("smoke")

    for native_modules in (True, False):
        loader = BuildConfigLoader(platform=Platform(name="smoke", native_modules=native_modules))
        results = await loader.load(LoadConfigInit(config_path="examples/buildconf.config.py"))
        for diagnostic in results.diagnostics:
            logger.warning("Diagnostic level=%s message=%s", diagnostic.level, diagnostic.message_text)
        if results.config is not None:
            logger.info(
                "Config loaded native_modules=%s namespace=%s root_dir=%s",
                native_modules,
                results.config.namespace,
                results.config.root_dir,
            )


if __name__ == "__main__":
    asyncio.run(main())
