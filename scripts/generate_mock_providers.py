import pandas as pd
import numpy as np

FIRST_NAMES = ["Leandro", "Daniel", "Marcos", "Ana", "Paulo", "Rafael", "Bruna", "Carlos", "Joana", "Tiago"]
LAST_NAMES = ["Silva", "Souza", "Oliveira", "Santos", "Pereira", "Lima", "Costa", "Almeida"]
LETTERS = list("ABCDEFGHIJKLMNOPQRSTUVWXYZ")


def generate_mock_providers(count=20, output_file="mock_providers.csv", seed=None):
    """
    Generates a fleet of tow trucks scattered around the requester, readable
    by providers.directory.load_providers_csv.
    """
    rng = np.random.default_rng(seed)

    data = []
    for provider_index in range(count):
        # Trucks within ~0.5-15 km of the requester
        distance_km = np.round(rng.uniform(0.5, 15.0), 1)

        # Rough urban speed of ~20 km/h plus a couple of minutes to get moving
        eta_minutes = int(np.ceil(distance_km / 20.0 * 60 + rng.integers(1, 4)))

        plate = "".join(rng.choice(LETTERS, size=3)) + "-" + str(rng.integers(1000, 9999))

        data.append({
            "provider_id": f"TOW-{str(provider_index + 1).zfill(3)}",
            "name": f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}",
            "plate": plate,
            "rating": np.round(rng.uniform(3.5, 5.0), 1),
            "distance_km": distance_km,
            "eta_minutes": eta_minutes,
            # 80% chance of being available
            "available": bool(rng.random() < 0.8),
        })

    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"Generated {count} providers and saved to '{output_file}'")

    available = df[df["available"]]
    print(f"  Available: {len(available)} / {count}")
    if not available.empty:
        nearest = available.sort_values("distance_km", kind="stable").iloc[0]
        print(f"  Nearest available: {nearest['provider_id']} ({nearest['name']}) at {nearest['distance_km']} km")
    return df


if __name__ == "__main__":
    generate_mock_providers(count=20)
