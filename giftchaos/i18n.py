"""
Localization - Renders engine message keys for display.

The engine only ever records keys and parameters (LogEntry, Narrative,
ActionDefinition.title_key). This module turns them into text:

    render("log.warmup.gave", {"actor": "Ada", "target": "Bo"}, "sv")
    -> "Ada ger 1 paket till Bo."

Unknown keys render as the key itself. A missing translation falls
back to English. Placeholders without a matching param are left as-is.
"""

from __future__ import annotations
from typing import Any, Mapping
import re

DEFAULT_LANG = "en"
LANGUAGES = ("en", "sv")

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        # Phases
        "phase.setup": "Setup",
        "phase.warmup": "Phase 1: Warm-up",
        "phase.endgame": "Phase 2: Endgame",
        "phase.ended": "Game over",
        "log.phase.warmup": "Warm-up begins: {players} players, {pile} gifts in the pile, {rolls} rolls each.",
        "log.phase.endgame": "Phase 2: Endgame! {rolls} rolls each. Hold on to your gifts.",
        "log.phase.ended": "All gifts have been handed out and the game is over.",
        "log.debug.phase": "Debug: phase set to {phase}.",

        # Reveal labels
        "ui.reveal.player": "Picking a player",
        "ui.reveal.players": "Picking two players",
        "ui.reveal.direction": "Picking a direction",

        # Actions
        "actions.warmup.1.title": "Double Grab",
        "actions.warmup.1.desc": "Take any two gifts from the pile.",
        "actions.warmup.2.title": "Single Grab",
        "actions.warmup.2.desc": "Take one gift from the pile.",
        "actions.warmup.3.title": "Forced Tribute",
        "actions.warmup.3.desc": "Give one of your gifts to a random player.",
        "actions.warmup.4.title": "The Grinch Tax",
        "actions.warmup.4.desc": "Steal any gift from a random player.",
        "actions.warmup.5.title": "Tiny Toss Right",
        "actions.warmup.5.desc": "Send your smallest unlocked gift to the right.",
        "actions.warmup.6.title": "Mega Move Left",
        "actions.warmup.6.desc": "Send your largest unlocked gift to the left.",

        "actions.endgame.1.title": "Ice Lock",
        "actions.endgame.1.desc": (
            "Freeze one gift. Frozen gifts cannot be traded, stolen, given away, or rotated."
        ),
        "actions.endgame.2.title": "Full Flip",
        "actions.endgame.2.desc": (
            "Swap all unlocked gifts with a random player. Frozen gifts stay put."
        ),
        "actions.endgame.3.title": "Trash Trade",
        "actions.endgame.3.desc": "Two players each pick an unwanted gift and swap with each other.",
        "actions.endgame.4.title": "Joker Swap",
        "actions.endgame.4.desc": "Two players each choose any gift from the other to swap.",
        "actions.endgame.5.title": "Santa's Hand",
        "actions.endgame.5.desc": "Give away a gift chosen by another player.",
        "actions.endgame.6.title": "Twist of Fate",
        "actions.endgame.6.desc": "Everyone rotates all gifts one step left or right.",

        # Narratives
        "narr.warmup.1": "{actor} takes {count} gift(s) from the pile 🎁",
        "narr.warmup.2": "{actor} takes {count} gift(s) from the pile 🎁",
        "narr.warmup.3": "{actor} picks a gift to give to {target} 🎁✨",
        "narr.warmup.4": "{actor} steals a gift from {target} 🔫🎁",
        "narr.warmup.5": "Everyone sends their smallest gift to the right 🎁🤏",
        "narr.warmup.6": "Everyone sends their largest gift to the left 🫸 🎁 🫷",

        "narr.endgame.1": "{actor} freezes any gift and keeps it permanently. 🥶🧊",
        "narr.endgame.2": "{actor} swaps all unlocked gifts with {target}. 🔄🎁",
        "narr.endgame.3": "{actor} trades unwanted gifts with {target}. ♻️🎁",
        "narr.endgame.4": "{a} and {b} swap a gift each. 🎭🎁",
        "narr.endgame.5": "{target} picks a gift from {actor}. 🎅🫳🎁",
        "narr.endgame.6": "Gifts rotate {dir}! 🔄🎁",

        # Logs
        "log.warmup.1": "{actor} takes {count} from the pile.",
        "log.warmup.2": "{actor} takes {count} from the pile.",
        "log.warmup.nothingToGive": "{actor} had nothing to give.",
        "log.warmup.gave": "{actor} gives 1 gift to {target}.",
        "log.warmup.noUnlockedSteal": "No unlocked gifts to steal.",
        "log.warmup.steal": "{actor} steals 1 gift from {target}.",
        "log.warmup.tiny": "Tiny Toss Right: everyone sends their smallest gift right.",
        "log.warmup.mega": "Mega Move Left: everyone sends their largest gift left.",
        "log.warmup.nothingToPass": "Nobody had an unlocked gift to pass on.",

        "log.endgame.noFreeze": "{actor} has nothing to freeze.",
        "log.endgame.freeze": "{actor} freezes a gift. It is now locked.",
        "log.endgame.noSwap": "{actor} had no one to swap with.",
        "log.endgame.flip": "{actor} swaps unlocked gifts with {target}.",
        "log.endgame.trash.notEnough": "Trash Trade failed: nobody else is at the table.",
        "log.endgame.trash.failed": "Trash Trade failed: selection could not be made.",
        "log.endgame.trash.missing": "Trash Trade failed: missing unlocked gifts.",
        "log.endgame.trash.swap": "Trash Trade: {actor} swaps unlocked gifts with {target}.",
        "log.endgame.trash.handover": (
            "Trash Trade: {target} had nothing to trade, so {actor} hands a gift over."
        ),
        "log.endgame.joker.notEnough": "Joker Swap failed: need two players with unlocked gifts.",
        "log.endgame.joker.failed": "Joker Swap failed: selection could not be made.",
        "log.endgame.joker.missing": "Joker Swap failed: {a} and {b} have no unlocked gifts.",
        "log.endgame.joker.swap": (
            "Joker Swap: {a} and {b} each choose an unlocked gift from the other."
        ),
        "log.endgame.santa.none": "{actor} had nothing to hand over.",
        "log.endgame.santa.gave": "Santa's Hand: {target} chooses an unlocked gift from {actor}.",
        "log.endgame.noTwist": "Twist of Fate: there was nothing to rotate.",
        "log.endgame.twist": "Twist of Fate: gifts rotate {dir}.",

        "dir.left": "left",
        "dir.right": "right",
    },
    "sv": {
        "phase.setup": "Förberedelse",
        "phase.warmup": "Fas 1: Warm up",
        "phase.endgame": "Fas 2: Endgame",
        "phase.ended": "Spelet är slut",
        "log.phase.warmup": "Warm up börjar: {players} spelare, {pile} paket i högen, {rolls} kast var.",
        "log.phase.endgame": "Fas 2: Endgame! {rolls} kast var. Håll hårt i paketen.",
        "log.phase.ended": "Nu är alla julklappar utdelade och spelet är slut.",
        "log.debug.phase": "Debug: fasen satt till {phase}.",

        "ui.reveal.player": "Slumpar spelare",
        "ui.reveal.players": "Slumpar två spelare",
        "ui.reveal.direction": "Slumpar riktning",

        "actions.warmup.1.title": "Dubbelt Upp!",
        "actions.warmup.1.desc": "Ta två valfria paket från högen 🎁🎁",
        "actions.warmup.2.title": "Ta ett paket",
        "actions.warmup.2.desc": "Ta ett valfritt paket från högen 🎁",
        "actions.warmup.3.title": "Forced Tribute",
        "actions.warmup.3.desc": "Ge ett av dina paket till en slumpmässig spelare 🫴🎁",
        "actions.warmup.4.title": "The Grinch Tax",
        "actions.warmup.4.desc": "Stjäl ett valfritt paket från en slumpmässig spelare 🔫🎁",
        "actions.warmup.5.title": "Tiny Toss Right",
        "actions.warmup.5.desc": "Skicka ditt minsta olåsta paket till höger 🎁🤏",
        "actions.warmup.6.title": "Mega Move Left",
        "actions.warmup.6.desc": "Skicka ditt största olåsta paket till vänster 🫸🎁🫷",

        "actions.endgame.1.title": "Ice Lock",
        "actions.endgame.1.desc": "Frys ett valfritt paket. 🥶🧊",
        "actions.endgame.2.title": "Full Flip",
        "actions.endgame.2.desc": "Byt alla dina paket med en slumpmässig spelare. 🔄",
        "actions.endgame.3.title": "Trash Trade",
        "actions.endgame.3.desc": "Två spelare byter oönskade paket 🗑️",
        "actions.endgame.4.title": "Joker Swap",
        "actions.endgame.4.desc": (
            "Två spelare väljer varsitt valfritt paket från den andre och byter. 🎭"
        ),
        "actions.endgame.5.title": "Santa's Hand",
        "actions.endgame.5.desc": "Du måste ge bort ett valfritt paket 🎅🫳",
        "actions.endgame.6.title": "Twist of Fate",
        "actions.endgame.6.desc": "Alla roterar sina paket ett steg vänster eller höger 🔮",

        "narr.warmup.1": "{actor} tar {count} paket från högen 🎁",
        "narr.warmup.2": "{actor} tar {count} paket från högen 🎁",
        "narr.warmup.3": "{actor} väljer ett paket att ge till {target} 🎁✨",
        "narr.warmup.4": "{actor} stjäl ett valfritt paket från {target} 🔫🎁",
        "narr.warmup.5": "Alla skickar sitt minsta paket till höger 🎁🤏",
        "narr.warmup.6": "Alla skickar sitt största paket till vänster 🫸 🎁 🫷",

        "narr.endgame.1": (
            "{actor} fryser ett valfritt paket och behåller det permanent tills spelets slut. 🥶🧊"
        ),
        "narr.endgame.2": (
            "{actor} byter alla paket med {target}. Frusna paket ligger kvar hos ägaren. 🔄"
        ),
        "narr.endgame.3": (
            "{actor} & {target} väljer varsitt oönskat paket och byter med varandra. "
            "Har du inget paket så tar du utan att ge! ♻️"
        ),
        "narr.endgame.4": (
            "{a} och {b} väljer ett varsitt paket från den andre och byter. "
            "Har du inget paket så tar du utan att ge! 🎭"
        ),
        "narr.endgame.5": "{actor} tvingas ge bort ett paket till {target} som får välja fritt! 🎅🫳",
        "narr.endgame.6": "Alla byter paket! Rotera alla dina paket åt {dir}! 🔮",

        "log.warmup.1": "{actor} tar {count} från högen.",
        "log.warmup.2": "{actor} tar {count} från högen.",
        "log.warmup.nothingToGive": "{actor} hade inget att ge.",
        "log.warmup.gave": "{actor} ger 1 paket till {target}.",
        "log.warmup.noUnlockedSteal": "Inga olåsta paket att stjäla.",
        "log.warmup.steal": "{actor} stjäl 1 paket från {target}.",
        "log.warmup.tiny": "Tiny Toss Right: alla skickar sitt minsta paket åt höger.",
        "log.warmup.mega": "Mega Move Left: alla skickar sitt största paket åt vänster.",
        "log.warmup.nothingToPass": "Ingen hade något olåst paket att skicka vidare.",

        "log.endgame.noFreeze": "{actor} har inget att frysa.",
        "log.endgame.freeze": "{actor} fryser ett paket.",
        "log.endgame.noSwap": "{actor} hade ingen att byta med.",
        "log.endgame.flip": "{actor} byter olåsta paket med {target}.",
        "log.endgame.trash.notEnough": "Trash Trade misslyckades: ingen annan sitter vid bordet.",
        "log.endgame.trash.failed": "Trash Trade misslyckades: val kunde inte göras.",
        "log.endgame.trash.missing": "Trash Trade misslyckades: saknar olåsta paket.",
        "log.endgame.trash.swap": "Trash Trade: {actor} byter olåsta paket med {target}.",
        "log.endgame.trash.handover": (
            "Trash Trade: {target} hade inget att byta, så {actor} lämnar över ett paket."
        ),
        "log.endgame.joker.notEnough": (
            "Joker Swap misslyckades: behöver två spelare med olåsta paket."
        ),
        "log.endgame.joker.failed": "Joker Swap misslyckades: val kunde inte göras.",
        "log.endgame.joker.missing": "Joker Swap misslyckades: {a} och {b} saknar olåsta paket.",
        "log.endgame.joker.swap": (
            "Joker Swap: {a} och {b} väljer varsitt olåst paket från den andre."
        ),
        "log.endgame.santa.none": "{actor} hade inget att ge bort.",
        "log.endgame.santa.gave": "Santa's Hand: {target} väljer ett olåst paket från {actor}.",
        "log.endgame.noTwist": "Twist of Fate: det fanns inget att rotera.",
        "log.endgame.twist": "Twist of Fate: paketen roterar {dir}.",

        "dir.left": "vänster",
        "dir.right": "höger",
    },
}


def normalize_lang(lang: str | None) -> str:
    """Map a language tag like "sv-SE" onto a supported catalog."""
    if not lang:
        return DEFAULT_LANG
    base = lang.strip().lower().replace("_", "-").split("-")[0]
    return base if base in MESSAGES else DEFAULT_LANG


def translate(key: str, lang: str | None = None) -> str:
    """Raw template for a key, falling back to English, then to the key."""
    catalog = MESSAGES[normalize_lang(lang)]
    if key in catalog:
        return catalog[key]
    return MESSAGES[DEFAULT_LANG].get(key, key)


def render(
    key: str,
    params: Mapping[str, Any] | None = None,
    lang: str | None = None,
) -> str:
    """
    Render a message key with its params.

    A "dir" param holding a Direction value is itself translated, so
    Twist of Fate reads "höger" rather than "right" in Swedish.
    """
    template = translate(key, lang)
    if not params:
        return template

    values = dict(params)
    direction = values.get("dir")
    if isinstance(direction, str) and f"dir.{direction}" in MESSAGES[DEFAULT_LANG]:
        values["dir"] = translate(f"dir.{direction}", lang)

    def substitute(match: re.Match) -> str:
        name = match.group(1)
        if name not in values:
            return match.group(0)
        return str(values[name])

    return _PLACEHOLDER.sub(substitute, template)


def has_key(key: str, lang: str | None = None) -> bool:
    return key in MESSAGES[normalize_lang(lang)]
