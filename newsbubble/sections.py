# newsbubble/sections.py
"""
Section catalog and keyword table.

The same table drives two consumers: the categorization prompt (rendered as
hints for the model) and the fallback categorizer (executed as substring rules).
Keywords are matched as lower-case substrings, so each one is chosen to avoid
common Italian words that contain it ("cina" in "cucina", "nato" in "senato").
Short words that are also prefixes of unrelated words ("gara" in "garanzia")
go in `words` and only match on word boundaries.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class Section:
    name: str
    description: str
    keywords: Tuple[str, ...]
    strict: bool = False  # only genuinely on-topic articles; may stay short
    words: Tuple[str, ...] = ()  # matched as whole words only

    def matches(self, text: str) -> bool:
        """`text` must already be lower-case."""
        if any(kw in text for kw in self.keywords):
            return True
        return any(re.search(rf"\b{re.escape(w)}\b", text) for w in self.words)


# Order is matching priority: more specific sections first.
SECTION_RULES: Tuple[Section, ...] = (
    Section(
        "Politica estera",
        "politica internazionale e geopolitica",
        ("guerra", "conflitto", "ucraina", "gaza", "israele", "palestin", "biden", "trump",
         "putin", "xi jinping", "pechino", "cinese", "alleanza atlantica", "nazioni unite",
         "geopolitic", "casa bianca", "cremlino", "unione europea", "bruxelles", "affari esteri"),
    ),
    Section(
        "Politica",
        "politica italiana interna",
        ("governo", "ministro", "parlamento", "meloni", "salvini", "schlein", "tajani",
         "referendum", "camera dei deputati", "senato", "quirinale", "mattarella",
         "palazzo chigi", "legge di bilancio", "opposizione", "maggioranza", "elezioni"),
    ),
    Section(
        "Sport",
        "sport e competizioni",
        ("calcio", "serie a", "champions", "juventus", "rossoneri", "nerazzurri", "as roma",
         "biancocelesti", "sportiv", "tennis", "basket", "formula 1", "motogp", "olimpi",
         "partita", "campionato", "atletica", "nuoto", "sinner", "ciclismo", "allenatore"),
        words=("sport", "gara", "gare"),
    ),
    Section(
        "Cultura",
        "cultura, cinema, teatro, arte, musica, libri",
        ("cinema", "film", "teatro", "musica", "concerto", "museo", "libro", "romanzo",
         "festival", "spettacol", "attore", "attrice", "regista", "cantante", "letteratura",
         "poesia", "opera lirica", "arte contemporanea", "mostra d'arte"),
        words=("cultura", "culturale", "arte", "mostra", "premio"),
    ),
    Section(
        "Filosofia",
        "filosofia: pensiero, etica, storia delle idee",
        ("filosof", "metafisic", "nietzsche", "kant", "platone", "aristotele", "socrate",
         "heidegger", "spinoza", "hegel", "esistenzialis", "epistemolog"),
        strict=True,
    ),
    Section(
        "Scienza",
        "scienza, ricerca, spazio, medicina, clima",
        ("scienz", "ricercator", "nasa", "astronom", "astrofisic", "fisica", "biolog",
         "genetic", "medicina", "vaccin", "cambiamento climatico", "studio pubblicato",
         "esopianet", "telescopio"),
    ),
    Section(
        "Televisione",
        "televisione, programmi, ascolti",
        ("televisione", "televisiv", "serie tv", "mediaset", "la7", "rai1", "rai 1", "rai2",
         "rai 2", "rai3", "rai 3", "raiplay", "sanremo", "reality", "talk show", "netflix",
         "ascolti", "auditel", "conduttore", "conduttrice", "palinsesto"),
    ),
    Section(
        "Roma",
        "cronaca e vita della città di Roma",
        ("roma capitale", "comune di roma", "a roma", "di roma", "campidoglio", "gualtieri",
         "atac", "trastevere", "tevere", "colosseo", "raccordo anulare", "fiumicino"),
    ),
    Section(
        "Stampa internazionale",
        "articoli e analisi dalla stampa estera",
        ("new york times", "guardian", "le monde", "washington post", "financial times",
         "bbc", "el país", "der spiegel", "reuters", "bloomberg", "the economist"),
    ),
)

SECTIONS_BY_NAME: Dict[str, Section] = {s.name: s for s in SECTION_RULES}

# Display order used by the settings page
SECTION_CATALOG: List[str] = [
    "Politica",
    "Politica estera",
    "Sport",
    "Cultura",
    "Roma",
    "Filosofia",
    "Scienza",
    "Televisione",
    "Stampa internazionale",
]

DEFAULT_SECTIONS: List[str] = ["Politica", "Politica estera", "Sport", "Cultura"]


def is_known_section(name: str) -> bool:
    return name in SECTIONS_BY_NAME


def rules_for(enabled: List[str]) -> List[Section]:
    """Rules for the enabled sections, in matching priority order."""
    wanted = set(enabled)
    return [s for s in SECTION_RULES if s.name in wanted]
