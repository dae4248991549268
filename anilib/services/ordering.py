"""
Ordre d'affichage des episodes.

Les episodes sont tries par la somme des nombres presents dans leur titre :
"Episode 2" (2) passe avant "Episode 10" (10). A somme egale, l'ordre de
stockage est conserve (tri stable, sans cle secondaire).
"""

from collections.abc import Iterable

from anilib.core.entities import Episode
from anilib.utils.helpers import numbers_sum


def sort_by_numeric_sum(episodes: Iterable[Episode]) -> list[Episode]:
    """Trie les episodes par somme croissante des nombres du titre."""
    return sorted(episodes, key=lambda episode: numbers_sum(episode.title))
