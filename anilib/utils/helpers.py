"""
Fonctions utilitaires partagees dans le projet AniLib.

Ce module centralise le nettoyage des noms issus du systeme de fichiers :
- folder_search_text : texte de recherche AniList depuis un nom de dossier
- build_episode_title : titre d'episode depuis un nom de fichier
- numbers_sum : somme des nombres d'un titre (tri des episodes)
"""

from anilib.utils.constants import (
    BRACES_CONTENT,
    NOT_ALPHANUMERIC,
    NUMBERS,
    PARENTHESES_CONTENT,
    SQUARE_BRACKET_CONTENT,
)


def folder_search_text(folder_name: str) -> str:
    """
    Retire les annotations entre crochets d'un nom de dossier.

    Ex: "[Judas] Cowboy Bebop [BD 1080p]" -> "Cowboy Bebop"
    """
    return SQUARE_BRACKET_CONTENT.sub("", folder_name).strip()


def build_episode_title(file_stem: str) -> str:
    """
    Construit le titre d'un episode depuis le nom de fichier (sans extension).

    Retire les contenus entre crochets, parentheses et accolades, remplace
    chaque suite de caracteres non alphanumeriques par un espace, puis
    supprime les espaces de bord.

    Ex: "[SubsPlease] Show Name - 01 (1080p) [ABCD1234]" -> "Show Name 01"
    """
    title = SQUARE_BRACKET_CONTENT.sub("", file_stem)
    title = PARENTHESES_CONTENT.sub("", title)
    title = BRACES_CONTENT.sub("", title)
    title = NOT_ALPHANUMERIC.sub(" ", title)
    return title.strip()


def numbers_sum(text: str) -> int:
    """Somme des entiers presents dans un texte ("S2 Ep 10" -> 12)."""
    return sum(int(number) for number in NUMBERS.findall(text))
