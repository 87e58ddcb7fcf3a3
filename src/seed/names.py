"""Random display names for generated actors and links."""

from __future__ import annotations

import random

ADJECTIVES = (
    "admiring",
    "brave",
    "clever",
    "dreamy",
    "eager",
    "focused",
    "gallant",
    "happy",
    "jolly",
    "keen",
    "lucid",
    "modest",
    "nifty",
    "optimistic",
    "quirky",
    "serene",
    "tender",
    "vibrant",
    "wise",
    "zealous",
)

SURNAMES = (
    "babbage",
    "curie",
    "darwin",
    "euler",
    "franklin",
    "galileo",
    "hopper",
    "johnson",
    "kepler",
    "lovelace",
    "meitner",
    "noether",
    "pasteur",
    "ride",
    "shannon",
    "tesla",
    "turing",
    "wozniak",
)


def random_name(rng: random.Random) -> str:
    """Return a name like ``serene_lovelace``; never ``boring_wozniak``."""
    while True:
        name = f"{rng.choice(ADJECTIVES)}_{rng.choice(SURNAMES)}"
        if name != "boring_wozniak":
            return name
