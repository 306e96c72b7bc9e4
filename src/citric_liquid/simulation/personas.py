"""Bot personas for headless simulation."""

from ..state.schema import NormaKind
from ..state.units import Stance

PERSONAS = {
    "cautious": {
        "name": "Cautious",
        "style": (
            "Heads home whenever it can and avoids fights. "
            "Collects stars rather than wins."
        ),
        "stop_at_home": "always",      # always | when_ready | never
        "engage": "never",             # always | never | when_healthier
        "stance": Stance.EVADE,
        "norma_kind": NormaKind.STARS,
        "branch": "first",             # first | last | random
    },
    "brawler": {
        "name": "Brawler",
        "style": (
            "Picks every fight on the way. "
            "Chases wins norma and only stops at home once the goal is met."
        ),
        "stop_at_home": "when_ready",
        "engage": "always",
        "stance": Stance.DEFEND,
        "norma_kind": NormaKind.WINS,
        "branch": "last",
    },
    "wanderer": {
        "name": "Wanderer",
        "style": (
            "Takes random branches and fights only when healthier than the rival."
        ),
        "stop_at_home": "when_ready",
        "engage": "when_healthier",
        "stance": Stance.EVADE,
        "norma_kind": NormaKind.STARS,
        "branch": "random",
    },
}


def get_persona(persona_name: str) -> dict:
    """Look up a persona, falling back to the cautious one."""
    return PERSONAS.get(persona_name, PERSONAS["cautious"])
