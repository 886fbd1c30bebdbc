# newsbubble/prompts.py
"""
Prompt construction for the reasoning service.

Three branches:
  - OBEDIENCE: the user wrote the profile; it is a filter, echoed back unchanged.
  - LEARNING: the profile is ours; infer a better one from the click history.
  - CATEGORIZE: not enough history; just sort the candidates into sections.

All branches ask for the same JSON shape, see parsing.py.
"""
from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .config import ARTICLES_PER_SECTION
from .profile_policy import ProfileMode
from .sections import SECTIONS_BY_NAME


class PromptBranch(str, Enum):
    OBEDIENCE = "obedience"
    LEARNING = "learning"
    CATEGORIZE = "categorize"


SYS_EDITOR = (
    "Sei un esperto giornalista italiano specializzato nella categorizzazione di notizie "
    "e nella profilazione dei lettori. Rispondi sempre e solo con un oggetto JSON valido, "
    "senza markdown e senza testo aggiuntivo."
)

SYS_OBEDIENT = (
    "Sei un redattore che seleziona notizie per un lettore che ha descritto personalmente "
    "i propri interessi. La descrizione del lettore è un vincolo rigido: non la reinterpreti, "
    "non la ampli e non la riscrivi. Rispondi sempre e solo con un oggetto JSON valido, "
    "senza markdown e senza testo aggiuntivo."
)

SYS_CLASSIFIER = (
    "Sei un classificatore di notizie italiane. Assegni ogni articolo a una sola sezione "
    "basandoti su titolo e descrizione. Rispondi sempre e solo con un oggetto JSON valido, "
    "senza markdown e senza testo aggiuntivo."
)


def select_branch(mode: ProfileMode, history_len: int, min_history: int) -> PromptBranch:
    # A user-written profile steers selection even before any click exists
    if mode == ProfileMode.USER_CUSTOMIZED:
        return PromptBranch.OBEDIENCE
    if history_len >= min_history:
        return PromptBranch.LEARNING
    return PromptBranch.CATEGORIZE


# ---------- Rendering helpers ----------

def _fmt_ts(value: Any) -> str:
    if value is None:
        return "data sconosciuta"
    if hasattr(value, "strftime"):
        return value.strftime("%Y-%m-%d %H:%M")
    return str(value)


def render_history(history: Sequence[Dict[str, Any]]) -> str:
    lines = []
    for ev in history:
        line = f"- [{_fmt_ts(ev.get('clicked_at'))}] {ev.get('title', '')} ({ev.get('source', '')})"
        if ev.get("category"):
            line += f" · categoria: {ev['category']}"
        desc = (ev.get("description") or "").strip()
        if desc:
            line += f"\n  {desc}"
        lines.append(line)
    return "\n".join(lines) or "(nessun articolo letto)"


def render_candidates(candidates: Sequence[Any]) -> str:
    blocks = []
    for a in candidates:
        blocks.append(
            f"URL: {a.url}\nTitolo: {a.title}\nDescrizione: {a.description or 'N/A'}\n---"
        )
    return "\n".join(blocks)


def render_sections(sections: Sequence[str], with_keywords: bool = False) -> str:
    lines = []
    for name in sections:
        rule = SECTIONS_BY_NAME.get(name)
        if rule is None:
            lines.append(f'- "{name}"')
            continue
        line = f'- "{name}": {rule.description}'
        if with_keywords and rule.keywords:
            line += " (indizi: " + ", ".join(rule.keywords[:8]) + ")"
        if rule.strict:
            line += " [sezione rigorosa]"
        lines.append(line)
    return "\n".join(lines)


def output_template(sections: Sequence[str], profile_hint: Optional[str]) -> str:
    per_section = ARTICLES_PER_SECTION
    shape: Dict[str, Any] = {
        "articles": {name: [f"url{i + 1}" for i in range(per_section)] for name in sections}
    }
    if profile_hint is not None:
        shape["userProfile"] = profile_hint
    return json.dumps(shape, ensure_ascii=False, indent=2)


# ---------- Branch builders ----------

def _learning_prompt(history, profile_text, sections, candidates) -> Tuple[str, str]:
    current = (profile_text or "").strip() or "(nessun profilo precedente)"
    user = f"""
STORICO LETTURE UTENTE (dal più recente):
{render_history(history)}

PROFILO ATTUALE (ipotesi da verificare, puoi riscriverlo):
{current}

COMPITO:
1. Analizza lo storico lungo queste dimensioni:
   - affinità per temi e sotto-temi specifici
   - taglio editoriale preferito (cronaca, analisi, opinione, inchiesta)
   - profondità cercata (notizie veloci vs approfondimenti)
   - fiducia nelle fonti (quali testate sceglie più spesso)
   - evoluzione nel tempo (interessi nuovi o in calo nei click recenti)
   - motivazione di fondo (perché legge ciò che legge)
2. Scrivi un profilo aggiornato in italiano (3-4 righe), concreto e specifico, non generico.
3. Seleziona {ARTICLES_PER_SECTION} articoli per ciascuna di queste sezioni:
{render_sections(sections)}

CRITERI DI SELEZIONE:
- Circa tre quarti degli articoli per sezione devono proseguire gli interessi dimostrati nei click.
- La parte restante serve alla scoperta: angoli nuovi ma vicini ai temi già letti.
- Analizza titolo E descrizione per categorizzare correttamente.
- Se in una sezione ci sono pochi articoli adatti, ripeti i migliori disponibili.
- Usa solo URL presenti nell'elenco qui sotto, copiati esattamente.

ARTICOLI DISPONIBILI:
{render_candidates(candidates)}

Restituisci SOLO questo JSON:
{output_template(sections, "Profilo aggiornato in 3-4 righe")}
""".strip()
    return SYS_EDITOR, user


def _obedience_prompt(history, profile_text, sections, candidates) -> Tuple[str, str]:
    recent = render_history(history[:10]) if history else "(nessun articolo letto)"
    user = f"""
PROFILO SCRITTO DAL LETTORE (vincolo rigido, da rispettare alla lettera):
«
{profile_text.strip()}
»

LETTURE RECENTI (solo contesto, non modificano il profilo):
{recent}

COMPITO:
Seleziona fino a {ARTICLES_PER_SECTION} articoli per ciascuna di queste sezioni:
{render_sections(sections)}

REGOLE:
- Scegli solo articoli coerenti con il profilo scritto dal lettore.
- È vietato includere argomenti che il profilo non autorizza, anche se popolari.
- Se il profilo esclude qualcosa, escludilo sempre.
- Se in una sezione ci sono pochi articoli adatti, ripeti i migliori disponibili invece di riempirla con altro.
- Usa solo URL presenti nell'elenco qui sotto, copiati esattamente.
- Nel campo "userProfile" ricopia il profilo del lettore IDENTICO, senza riscriverlo.

ARTICOLI DISPONIBILI:
{render_candidates(candidates)}

Restituisci SOLO questo JSON:
{output_template(sections, "profilo del lettore ricopiato identico")}
""".strip()
    return SYS_OBEDIENT, user


def _categorize_prompt(sections, candidates) -> Tuple[str, str]:
    strict = [n for n in sections if SECTIONS_BY_NAME.get(n) and SECTIONS_BY_NAME[n].strict]
    strict_rule = ""
    if strict:
        names = ", ".join(f'"{n}"' for n in strict)
        strict_rule = (
            f"\n- Per {names}: inserisci SOLO contenuti autenticamente filosofici "
            "(pensatori, correnti, questioni etiche o teoriche). Una notizia che cita "
            "di sfuggita un filosofo NON basta. Meglio lasciare la sezione con meno "
            f"di {ARTICLES_PER_SECTION} articoli che riempirla con contenuti non pertinenti."
        )
    user = f"""
COMPITO:
Classifica ciascun articolo in UNA SOLA delle seguenti sezioni, basandoti solo su titolo e descrizione:
{render_sections(sections, with_keywords=True)}

REGOLE:
- Ogni URL può comparire in una sola sezione.
- Fino a {ARTICLES_PER_SECTION} articoli per sezione, scegliendo i più rilevanti.
- Se in una sezione ci sono pochi articoli adatti, puoi ripetere il migliore disponibile.{strict_rule}
- Usa solo URL presenti nell'elenco qui sotto, copiati esattamente.

ARTICOLI DISPONIBILI:
{render_candidates(candidates)}

Restituisci SOLO questo JSON:
{output_template(sections, None)}
""".strip()
    return SYS_CLASSIFIER, user


def build_prompts(
    branch: PromptBranch,
    history: Sequence[Dict[str, Any]],
    profile_text: Optional[str],
    sections: List[str],
    candidates: Sequence[Any],
) -> Tuple[str, str]:
    """Return (system, user) instructions for the chosen branch."""
    if not sections:
        raise ValueError("at least one section must be enabled")
    if branch == PromptBranch.OBEDIENCE:
        return _obedience_prompt(history, profile_text or "", sections, candidates)
    if branch == PromptBranch.LEARNING:
        return _learning_prompt(history, profile_text, sections, candidates)
    return _categorize_prompt(sections, candidates)
