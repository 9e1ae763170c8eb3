import csv
import logging
import os
import sys
from typing import List

# Allow `python scripts/run_tow_simulation.py` from the repo root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import load_settings
from rides.models import RideStatus, SessionSnapshot
from rides.session import TowSession
from scheduling.clock import VirtualClock


def run_simulation(origin="Rua A, 123", destination="Rua B, 456", output_file="tow_timeline.csv"):
    print("=== STARTING END-TO-END TOW SIMULATION ===")

    # 1. Configure System
    settings = load_settings()
    clock = VirtualClock()
    session = TowSession.from_settings(settings, clock)

    timeline: List[tuple] = []

    def record(snapshot: SessionSnapshot):
        request = snapshot.request
        timeline.append((
            round(clock.now(), 2),
            snapshot.stage.value,
            snapshot.status.value,
            snapshot.draft.distance_km,
            str(snapshot.quote.price) if snapshot.quote else "",
            request.provider.id if request else "",
        ))

    session.subscribe(record)
    print(f"Providers available: {len(session.directory.list_available())}")

    # 2. Type the addresses, one edit per field, then let the debounce settle
    session.edit_origin(origin)
    clock.advance(0.2)
    session.edit_destination(destination)
    clock.advance(settings.timing.debounce_seconds + settings.timing.recalculation_latency_seconds)
    print(f"Estimated distance: {session.draft.distance_km} km")

    # 3. Quote
    session.request_quote()
    clock.advance(settings.timing.quote_latency_seconds)
    quote = session.quote
    print(f"Quote: {quote.price} for {quote.distance_km} km")

    # 4. Confirm and let the tow truck arrive
    request = session.confirm_request()
    print(f"Matched {request.provider.name} ({request.provider.plate}), ETA {request.eta_minutes} min")
    clock.advance(settings.timing.arrive_after_seconds)

    if session.request.status != RideStatus.ARRIVED:
        print(f"[FAILED] Request ended in {session.request.status.value}")
        return timeline

    session.finalize()
    print(f"[SUCCESS] Request {request.id} finished at t={clock.now():.1f}s")

    # 5. Write the timeline
    with open(output_file, "w", newline="") as file:
        writer = csv.writer(file)
        writer.writerow(["t_seconds", "stage", "status", "distance_km", "price", "provider_id"])
        writer.writerows(timeline)

    print("\n=== SIMULATION COMPLETE ===")
    print(f"Timeline ({len(timeline)} snapshots) written to '{output_file}'.")
    return timeline


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_simulation()
