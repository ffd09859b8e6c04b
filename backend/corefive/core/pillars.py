"""The five Core Five pillars and their fixed weekly targets."""
from dataclasses import dataclass
from enum import Enum


class Pillar(str, Enum):
    # Declaration order is the canonical iteration order
    cardio = "cardio"
    strength = "strength"
    clean_eating = "clean_eating"
    mindfulness = "mindfulness"
    sleep = "sleep"


@dataclass(frozen=True)
class PillarConfig:
    id: Pillar
    name: str
    weekly_target: float
    unit: str
    unit_label: str
    description: str
    color: str
    icon: str


# Weekly targets are the "standard" tier: ambitious but realistic for busy adults
PILLAR_CONFIGS: dict[Pillar, PillarConfig] = {
    Pillar.cardio: PillarConfig(
        id=Pillar.cardio,
        name="Cardio",
        weekly_target=150,
        unit="min",
        unit_label="minutes",
        description="Zone 2, walking, running, cycling, swimming",
        color="#ef4444",
        icon="heart",
    ),
    Pillar.strength: PillarConfig(
        id=Pillar.strength,
        name="Strength",
        weekly_target=3,
        unit="sessions",
        unit_label="sessions",
        description="Resistance training, gym, bodyweight",
        color="#f97316",
        icon="dumbbell",
    ),
    Pillar.clean_eating: PillarConfig(
        id=Pillar.clean_eating,
        name="Clean Eating",
        weekly_target=5,
        unit="days",
        unit_label="days on-plan",
        description="Protein-forward, whole foods, minimal junk",
        color="#22c55e",
        icon="leaf",
    ),
    Pillar.mindfulness: PillarConfig(
        id=Pillar.mindfulness,
        name="Mindfulness",
        weekly_target=60,
        unit="min",
        unit_label="minutes",
        description="Breathwork, meditation, journaling",
        color="#06b6d4",
        icon="brain",
    ),
    Pillar.sleep: PillarConfig(
        id=Pillar.sleep,
        name="Sleep",
        weekly_target=49,  # 7 hours x 7 nights
        unit="hrs",
        unit_label="hours this week",
        description="Hours slept (target 7h+ per night)",
        color="#8b5cf6",
        icon="moon",
    ),
}

PILLARS: list[Pillar] = list(Pillar)


def target(pillar: Pillar) -> float:
    return PILLAR_CONFIGS[pillar].weekly_target
