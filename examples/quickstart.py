"""OrbWatch Quickstart — parse a TLE, propagate it and print where it is."""

from datetime import timedelta

from orbwatch import calculate_ground_track, parse_elements, parse_records, propagate

# ISS (ZARYA) TLE
tle_text = """
ISS (ZARYA)
1 25544U 98067A   24045.54896019  .00016717  00000-0  30093-3 0  9993
2 25544  51.6412 207.4925 0004948 290.5508 178.9792 15.49583488439596
""".strip()

# Parse it
record = parse_records(tle_text)[0]
iss = parse_elements(record).elements

print(f"Satellite: {iss.name}")
print(f"NORAD ID:  {iss.catalog_id}")
print(f"Epoch:     {iss.epoch}")
print(f"Incl:      {iss.inclination_deg:.4f}°")
print(f"Ecc:       {iss.eccentricity:.7f}")
print(f"Period:    {iss.period_minutes:.1f} min")
print(f"Perigee:   {iss.perigee_km:.1f} km, apogee {iss.apogee_km:.1f} km")

# Where is it half an hour after epoch?
state = propagate(iss, iss.epoch + timedelta(minutes=30))
print(f"\nLat/Lon:   {state.latitude_deg:.2f}°, {state.longitude_deg:.2f}°")
print(f"Altitude:  {state.altitude_km:.1f} km")
print(f"Speed:     {state.speed_km_s:.3f} km/s")

# One orbit of ground track at 10 minute spacing
for point in calculate_ground_track(iss, iss.epoch, iss.period_minutes, 10.0):
    print(f"{point.epoch:%H:%M} | {point.latitude_deg:7.2f}° {point.longitude_deg:8.2f}°")
