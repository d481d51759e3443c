from dataclasses import dataclass


@dataclass
class Scale:
    name: str
    nodes: int
    layers: int
    mean_degree: float
    queries: int

SCALES = {
    "tiny":   Scale("tiny", 50, 3, 4.0, 20),
    "small":  Scale("small", 1_000, 5, 8.0, 200),
    "medium": Scale("medium", 10_000, 10, 10.0, 1_000),
    "large":  Scale("large", 100_000, 10, 10.0, 2_000),
}
