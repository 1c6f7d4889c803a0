"""Run the resolve-and-publish pipeline for one invocation."""

from __future__ import annotations

import logging
from typing import List, Optional

from .exceptions import TermResolutionError
from .interpreter import TermInterpreter
from .models import PublishResult, ScopeConfig
from .publisher import GlossaryPublisher
from .resolver import resolve_versions

logger = logging.getLogger(__name__)


class Generator:
    """Generates the MRG(s) of a scope.

    Usage:
        generator = Generator(config)
        results = generator.run("v1")   # one version (primary or alt vsntag)
        results = generator.run()       # every version in the SAF
    """

    def __init__(self, config: ScopeConfig, interpreter: Optional[TermInterpreter] = None):
        self.config = config
        self.publisher = GlossaryPublisher(config, interpreter)

    def run(self, vsntag: Optional[str] = None) -> List[PublishResult]:
        """Publish the requested version, or all versions if none is given.

        Raises:
            VersionNotFoundError: If ``vsntag`` matches no version. Nothing
                is written in that case.
        """
        logger.info("Initializing generator for scope '%s'...", self.config.scopetag)
        resolution = resolve_versions(vsntag, self.config)

        if resolution.all_versions:
            logger.info("No vsntag was specified. Processing all versions...")

        results: List[PublishResult] = []
        for version in resolution.versions:
            if resolution.matched_alias:
                logger.info(
                    "Processing version '%s' (altvsn '%s')...",
                    version.vsntag,
                    resolution.matched_alias,
                )
            else:
                logger.info("Processing version '%s'...", version.vsntag)

            try:
                result = self.publisher.publish(version)
            except TermResolutionError as exc:
                logger.error(
                    "Skipping version '%s' of scope '%s': %s",
                    version.vsntag,
                    self.config.scopetag,
                    exc,
                )
                result = PublishResult(vsntag=version.vsntag, errors=[str(exc)])
            results.append(result)

        return results
