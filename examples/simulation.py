"""OrbWatch Simulation — fetch live elements, add a body, watch for close approaches.

Needs network access to celestrak.org.
"""

import logging

from orbwatch import CelestrakClient, Simulator

logging.basicConfig(level=logging.INFO)

client = CelestrakClient()
records = client.fetch_group("stations", limit=20)

sim = Simulator()
skipped = sim.load_records(records)
print(f"Tracking {len(sim.satellites)} satellites ({len(skipped)} skipped)")

# Park a heavy body on top of the first station
target = sim.satellites[0]
x, y, z = target.position.position_km
result = sim.add_user_satellite(x, y, z, mass_kg=50000.0, name="shadow")
if not result.success:
    raise SystemExit(result.error)

for _ in range(5):
    for p in sim.tick(10.0):
        print(
            f"t+{sim.elapsed_seconds:4.0f}s | {p.risk_level.value:9s} | "
            f"{p.object1_name} vs {p.object2_name} | "
            f"{p.min_distance_km:8.3f} km in {p.time_to_closest_approach_s:.0f} s"
        )

# An out-of-range placement is refused, not raised
print(sim.add_user_satellite(7000.0, 0.0, 60000.0).error)
