#!/usr/bin/env python3
"""Demo script to book a short wrestling show."""

from pathlib import Path

from turnbuckle.booking import BookingService
from turnbuckle.config import EngineConfig
from turnbuckle.core.enums import Alignment, TitleTier
from turnbuckle.core.models import Npc, Rivalry, Segment, Title, Wrestler
from turnbuckle.core.tables import DEFAULT_STIPULATIONS
from turnbuckle.events import EventBus, InterferenceEvent, TitleChangeEvent
from turnbuckle.logging import ShowLog
from turnbuckle.store import InMemoryRepository


def main():
    """Run a demo show."""
    print("=" * 60)
    print("TURNBUCKLE - Wrestling Booking Demo")
    print("=" * 60)
    print()

    store = InMemoryRepository()
    cena = Wrestler(name="John Cena", fans=120_000, alignment=Alignment.FACE)
    rock = Wrestler(name="The Rock", fans=200_000, alignment=Alignment.FACE)
    edge = Wrestler(name="Edge", fans=80_000, alignment=Alignment.HEEL)
    christian = Wrestler(name="Christian", fans=65_000, alignment=Alignment.HEEL)
    hardys = [Wrestler(name="Matt Hardy", fans=70_000), Wrestler(name="Jeff Hardy", fans=75_000)]
    referee = Npc(name="Earl Hebner", role="Referee", awareness=40)
    manager = Npc(name="Paul Heyman", role="Manager", alignment=Alignment.HEEL)
    edge.manager_id = manager.id

    title = Title(name="World Championship", tier=TitleTier.WORLD)
    rivalry = Rivalry(cena, rock, storyline_notes="Once in a lifetime")
    opener = Segment(name="Opener", referee_id=referee.id)
    main_event = Segment(name="Main Event", referee_id=referee.id,
                         stipulation=DEFAULT_STIPULATIONS["Steel Cage"])

    for entity in (cena, rock, edge, christian, *hardys, referee, manager,
                   title, rivalry, opener, main_event):
        store.add(entity)

    for wrestler in store.all(Wrestler):
        print(f"{wrestler.name:<12} {wrestler.tier.emoji} {wrestler.tier.display_name:<13} {wrestler.fans:>8,} fans")
    print()

    # Set up event handlers
    bus = EventBus()

    def on_title(event: TitleChangeEvent):
        print(f"  >>> TITLE: {event.title_name} has a new champion")

    def on_interference(event: InterferenceEvent):
        print(f"  >>> INTERFERENCE: {event.message}")

    bus.subscribe(TitleChangeEvent, on_title)
    bus.subscribe(InterferenceEvent, on_interference)

    show_log = ShowLog(name="Monday Night")
    show_log.attach(bus)

    service = BookingService(store, bus=bus, config=EngineConfig(seed=2026))

    # Opener: tag match with a heel manager at ringside
    print("-" * 60)
    print("OPENER")
    print("-" * 60)
    service.add_heat(rivalry.id, 18, "Contract signing brawl")
    attempt = service.consider_interference(opener.id, manager.id, edge.id)
    outcome = service.resolve_match(
        [edge.id, christian.id],
        [w.id for w in hardys],
        segment_id=opener.id,
        interference=[attempt] if attempt else [],
    )
    print(outcome.result.summary)
    print()

    # Main event: title on the line inside the cage
    print("-" * 60)
    print("MAIN EVENT")
    print("-" * 60)
    challenge = service.challenge_title(cena.id, title.id)
    print(challenge.message)
    outcome = service.resolve_match([cena.id], [rock.id], segment_id=main_event.id, title_id=title.id)
    print(outcome.result.summary)

    print()
    print("-" * 60)
    print("SHOW LOG")
    print("-" * 60)
    summary = show_log.summary()
    print(summary)

    output_path = Path("show_summary.txt")
    output_path.write_text(summary)
    print()
    print(f"Show summary written to: {output_path}")


if __name__ == "__main__":
    main()
