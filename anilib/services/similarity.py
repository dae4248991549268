"""
Service de similarite entre un nom de dossier et des candidats AniList.

SimilarityMatcher calcule, pour chaque candidat, le meilleur score entre le
texte de recherche et chacune de ses variantes de titre (romaji, anglais,
natif), puis classe les candidats.

Le scoring est deterministe : a score egal, l'ordre d'entree est conserve.
"""

from collections.abc import Sequence
from typing import Optional

from rapidfuzz import fuzz, utils

from anilib.core.entities import AnimeTitle
from anilib.core.ports.api_clients import MediaMatch


def _calculate_title_score(query: str, candidate_title: Optional[str]) -> float:
    """
    Score de similarite entre deux titres (0-100).

    Utilise token_sort_ratio pour ignorer l'ordre des mots.
    Normalise via default_process (minuscules, ponctuation retiree).
    Une variante absente vaut 0.
    """
    if not candidate_title:
        return 0.0
    return fuzz.token_sort_ratio(query, candidate_title, processor=utils.default_process)


class SimilarityMatcher:
    """
    Classement des candidats par similarite de titre.

    Sans etat et sans I/O. Un texte vide donne un score nul a tous les
    candidats : le premier candidat est alors retenu.
    """

    def score(self, query: str, title: AnimeTitle) -> float:
        """Retourne le meilleur score parmi les variantes presentes."""
        return max(
            (_calculate_title_score(query, variant) for variant in title.variants),
            default=0.0,
        )

    def rank(
        self, query: str, candidates: Sequence[MediaMatch]
    ) -> list[tuple[MediaMatch, float]]:
        """
        Classe les candidats par score decroissant.

        sorted() est stable : les ex-aequo restent dans l'ordre du fournisseur.
        """
        scored = [(candidate, self.score(query, candidate.title)) for candidate in candidates]
        return sorted(scored, key=lambda item: item[1], reverse=True)

    def best_match(
        self, query: str, candidates: Sequence[MediaMatch]
    ) -> Optional[MediaMatch]:
        """Retourne le meilleur candidat, None si la liste est vide."""
        ranked = self.rank(query, candidates)
        if not ranked:
            return None
        return ranked[0][0]
