"""
protoplay entry point
---------------------

Replays a scene headlessly: loads config and scene, bootstraps the element
tree, lets timeout chains run for a while, then shuts down.

    python -m protoplay scene.yaml --seconds 5 --click 1:1 --chain 2:1,3:1
"""

import argparse
import asyncio
import sys

from protoplay.engine import AnimationSystem
from protoplay.managers import ConfigManager
from protoplay.models.enums import LogCategory
from protoplay.models.events import EventType
from protoplay.runtime import SceneBootstrap, load_scene
from protoplay.services import EventBus
from protoplay.utils.logger import get_category_logger
from protoplay.utils.validation import ValidationError

log = get_category_logger(LogCategory.SYSTEM)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="protoplay", description="Replay prototype animations of a scene")
    parser.add_argument("scene", help="Scene document (YAML or JSON)")
    parser.add_argument("--config", default="config/config.yaml", help="Engine config file")
    parser.add_argument("--seconds", type=float, default=5.0, help="How long to run timeout chains")
    parser.add_argument("--click", action="append", default=[], metavar="NODE_ID", help="Click a node after bootstrap")
    parser.add_argument("--chain", metavar="ID,ID,...", help="Fail unless these nodes link by reactions, in order")
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)

    config = ConfigManager(args.config).load()
    event_bus = EventBus()
    for event_type in (EventType.VARIANT_SWITCHED, EventType.ANIMATION_ABORTED):
        event_bus.subscribe(event_type, lambda e: log.info(f"Event {e.type.name}", **e.to_data()))

    system = AnimationSystem(config, event_bus)
    try:
        roots, resolved = load_scene(args.scene)
    except (OSError, ValidationError) as ex:
        log.error("Cannot load scene", path=args.scene, error=str(ex))
        return 1

    scene = SceneBootstrap(system).build(roots, resolved)

    if args.chain:
        chain = [node_id.strip() for node_id in args.chain.split(",") if node_id.strip()]
        try:
            if not scene.validate_chain(chain):
                raise ValidationError("Animation chain needs at least two nodes", "chain")
        except ValidationError as ex:
            log.error("Invalid animation chain", chain=args.chain, error=str(ex))
            system.destroy()
            return 1
        log.info("Animation chain valid", chain=" -> ".join(chain))

    for node_id in args.click:
        element = scene.element(node_id)
        if element is None:
            log.warn("Click target not found", node=node_id)
            continue
        element.click()

    try:
        await asyncio.sleep(args.seconds)
    finally:
        summary = system.timers.summary()
        system.destroy()
        log.info("Replay finished", timers=summary)
    return 0


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
