# scripts/demo_registry.py
import asyncio
import os
import sys
from pathlib import Path

from dndreg.core import log
from dndreg.core.contracts import BaseDragSource, BaseDropTarget
from dndreg.core.metrics import force_emit
from dndreg.wire_config import build_from_yaml

DEFAULT_CFG = Path(__file__).resolve().parent.parent / "config" / "registry.yaml"


class CardSource(BaseDragSource):
    def __init__(self, card: str):
        self.card = card

    def begin_drag(self, monitor=None, handle=None):
        return {"card": self.card}


class Column(BaseDropTarget):
    pass


async def main(cfg_path: str):
    registry, _actions = build_from_yaml(cfg_path)
    l = log.get("demo")

    cards = [registry.add_source("card", CardSource(c)) for c in ("a", "b", "c")]
    cols = [registry.add_target(["card", "note"], Column()) for _ in range(2)]
    l.info("registered sources=%s targets=%s", cards, cols)

    # simulate a drag where the source component goes away mid-flight
    registry.pin_source(cards[0])
    registry.remove_source(cards[0])
    l.info("pinned source still resolves: %s", registry.get_source(cards[0], include_pinned=True).card)
    registry.unpin_source()

    await asyncio.sleep(0)  # let the deferred notifications run
    force_emit()


if __name__ == "__main__":
    cfg = sys.argv[1] if len(sys.argv) > 1 else os.getenv("DNDREG_CONFIG", str(DEFAULT_CFG))
    asyncio.run(main(cfg))
