"""
Playground rules - put a session into manual-testing mode and back
"""

import logging

logger = logging.getLogger(__name__)


class PlaygroundRules:
    """Freeze automatic generation and the riser; everything else keeps running."""

    @staticmethod
    def apply_start_rules(session) -> None:
        level = session.level
        if level.slot_generator is not None:
            level.slot_generator.suspend()
        session.set_riser_enabled(False)
        level.freeze()
        logger.info("Playground rules applied")

    @staticmethod
    def release(session) -> None:
        level = session.level
        if level.slot_generator is not None:
            level.slot_generator.resume()
        level.unfreeze()
        session.set_riser_enabled(True)
        logger.info("Playground rules released")
